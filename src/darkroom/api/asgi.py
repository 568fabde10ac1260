"""ASGI entrypoint for the darkroom API."""

from darkroom.api.app import create_app
from darkroom.containers import build_container

app = create_app(build_container())

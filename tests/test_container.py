"""Tests for container wiring."""

from darkroom.containers import build_container
from darkroom.services.triage import TriageController
from tests.conftest import FixedClock


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings, clock=FixedClock())

    assert container.darkroom_service is not None
    assert container.photo_service.darkroom_service is container.darkroom_service
    assert container.darkroom_loader.photo_service is container.photo_service
    assert container.darkroom_service.reveal_window_minutes == 15.0


def test_triage_controller_uses_configured_delays(container) -> None:
    controller = container.triage_controller("u1")

    assert isinstance(controller, TriageController)
    assert controller.user_id == "u1"
    assert controller.completion_delay_seconds == 0.01
    assert controller.undo_animation_seconds == 0.01

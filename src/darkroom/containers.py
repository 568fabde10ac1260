"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from darkroom.adapters.supabase_darkroom_repository import SupabaseDarkroomRepository
from darkroom.adapters.supabase_photo_repository import SupabasePhotoRepository
from darkroom.config import Settings
from darkroom.services.clock import Clock, SystemClock
from darkroom.services.darkroom import DarkroomService
from darkroom.services.loader import DarkroomLoader
from darkroom.services.photos import PhotoService
from darkroom.services.triage import TriageController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    darkroom_service: DarkroomService
    photo_service: PhotoService
    darkroom_loader: DarkroomLoader

    def triage_controller(self, user_id: str) -> TriageController:
        """Create a triage controller for one user's darkroom session."""
        return TriageController(
            user_id=user_id,
            loader=self.darkroom_loader,
            photo_service=self.photo_service,
            darkroom_service=self.darkroom_service,
            completion_delay_seconds=self.settings.triage_completion_delay_seconds,
            undo_animation_seconds=self.settings.undo_animation_seconds,
        )


def build_container(
    settings: Settings | None = None, clock: Clock | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_clock = clock or SystemClock()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    darkroom_service = DarkroomService(
        repository=SupabaseDarkroomRepository(supabase_client),
        clock=resolved_clock,
        reveal_window_minutes=resolved_settings.reveal_window_minutes,
    )
    photo_service = PhotoService(
        repository=SupabasePhotoRepository(supabase_client),
        darkroom_service=darkroom_service,
        clock=resolved_clock,
        deletion_grace_days=resolved_settings.deletion_grace_days,
    )
    return AppContainer(
        settings=resolved_settings,
        darkroom_service=darkroom_service,
        photo_service=photo_service,
        darkroom_loader=DarkroomLoader(
            photo_service=photo_service, darkroom_service=darkroom_service
        ),
    )

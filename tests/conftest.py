"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from darkroom.config import Settings
from darkroom.containers import AppContainer
from darkroom.domain.darkroom import DarkroomTimer
from darkroom.domain.photos import DEVELOPING, PhotoRecord, month_bucket
from darkroom.services.clock import Clock
from darkroom.services.darkroom import DarkroomRepository, DarkroomService
from darkroom.services.loader import DarkroomLoader
from darkroom.services.photos import PhotoRepository, PhotoService

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


@dataclass
class FixedClock(Clock):
    """Clock pinned to an instant with a fixed random draw."""

    current: datetime = NOW
    random_value: float = 0.5

    def now(self) -> datetime:
        return self.current

    def random(self) -> float:
        return self.random_value

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@dataclass
class InMemoryDarkroomRepository(DarkroomRepository):
    """In-memory darkroom repository for tests."""

    darkrooms: dict[str, DarkroomTimer] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    updates: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def get_darkroom(self, user_id: str) -> DarkroomTimer | None:
        if self.fail_reads:
            raise RuntimeError("darkroom store unavailable")
        return self.darkrooms.get(user_id)

    def create_darkroom(self, darkroom: DarkroomTimer) -> None:
        if self.fail_writes:
            raise RuntimeError("darkroom store unavailable")
        self.darkrooms[darkroom.user_id] = darkroom

    def update_darkroom(self, user_id: str, fields: dict[str, object]) -> None:
        if self.fail_writes:
            raise RuntimeError("darkroom store unavailable")
        if user_id not in self.darkrooms:
            raise LookupError(f"Darkroom not found for user {user_id}")
        self.darkrooms[user_id] = replace(self.darkrooms[user_id], **fields)
        self.updates.append((user_id, dict(fields)))


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[str, PhotoRecord] = field(default_factory=dict)
    fail_queries: bool = False
    failing_ids: set[str] = field(default_factory=set)
    updates: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    status_queries: int = 0

    def add(
        self,
        user_id: str = "u1",
        status: str = DEVELOPING,
        captured_at: datetime = NOW,
        photo_id: str | None = None,
        **fields: object,
    ) -> PhotoRecord:
        photo = PhotoRecord(
            id=photo_id or str(uuid4()),
            user_id=user_id,
            image_url=f"https://cdn.example.com/{user_id}.jpg",
            captured_at=captured_at,
            status=status,
            month=month_bucket(captured_at),
            **fields,
        )
        self.photos[photo.id] = photo
        return photo

    def create_photo(
        self,
        user_id: str,
        image_url: str,
        captured_at: datetime,
        status: str,
        month: str,
    ) -> str:
        photo_id = str(uuid4())
        self.photos[photo_id] = PhotoRecord(
            id=photo_id,
            user_id=user_id,
            image_url=image_url,
            captured_at=captured_at,
            status=status,
            month=month,
        )
        return photo_id

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        if self.fail_queries:
            raise RuntimeError("photo store unavailable")
        return self.photos.get(photo_id)

    def list_photos_by_status(self, user_id: str, status: str) -> list[PhotoRecord]:
        self.status_queries += 1
        if self.fail_queries:
            raise RuntimeError("photo store unavailable")
        return [
            photo
            for photo in self.photos.values()
            if photo.user_id == user_id and photo.status == status
        ]

    def list_photos_by_state(
        self, user_id: str, photo_state: str
    ) -> list[PhotoRecord]:
        if self.fail_queries:
            raise RuntimeError("photo store unavailable")
        return [
            photo
            for photo in self.photos.values()
            if photo.user_id == user_id and photo.photo_state == photo_state
        ]

    def update_photo(self, photo_id: str, fields: dict[str, object]) -> None:
        if photo_id in self.failing_ids:
            raise RuntimeError(f"write rejected for {photo_id}")
        if photo_id not in self.photos:
            raise LookupError(f"Photo not found: {photo_id}")
        self.photos[photo_id] = replace(self.photos[photo_id], **fields)
        self.updates.append((photo_id, dict(fields)))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def darkroom_repository() -> InMemoryDarkroomRepository:
    return InMemoryDarkroomRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def darkroom_service(
    darkroom_repository: InMemoryDarkroomRepository, clock: FixedClock
) -> DarkroomService:
    return DarkroomService(repository=darkroom_repository, clock=clock)


@pytest.fixture
def photo_service(
    photo_repository: InMemoryPhotoRepository,
    darkroom_service: DarkroomService,
    clock: FixedClock,
) -> PhotoService:
    return PhotoService(
        repository=photo_repository, darkroom_service=darkroom_service, clock=clock
    )


@pytest.fixture
def loader(
    photo_service: PhotoService, darkroom_service: DarkroomService
) -> DarkroomLoader:
    return DarkroomLoader(photo_service=photo_service, darkroom_service=darkroom_service)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        admin_token="admin-token",
        triage_completion_delay_seconds=0.01,
        undo_animation_seconds=0.01,
    )


@pytest.fixture
def container(
    settings: Settings,
    darkroom_service: DarkroomService,
    photo_service: PhotoService,
    loader: DarkroomLoader,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        darkroom_service=darkroom_service,
        photo_service=photo_service,
        darkroom_loader=loader,
    )

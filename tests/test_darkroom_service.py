"""Tests for the darkroom timer service."""

from datetime import timedelta

from darkroom.domain.darkroom import DarkroomTimer
from darkroom.services.darkroom import DarkroomService
from tests.conftest import NOW, FixedClock, InMemoryDarkroomRepository


def _timer(next_reveal_at, last_revealed_at=None) -> DarkroomTimer:
    return DarkroomTimer(
        user_id="u1",
        next_reveal_at=next_reveal_at,
        last_revealed_at=last_revealed_at,
        created_at=NOW - timedelta(days=1),
    )


def test_get_darkroom_creates_timer_within_reveal_window() -> None:
    repository = InMemoryDarkroomRepository()
    service = DarkroomService(repository, FixedClock(random_value=0.2))

    result = service.get_darkroom("u1")

    assert result.success
    assert result.darkroom is not None
    assert result.darkroom.next_reveal_at == NOW + timedelta(minutes=3)
    assert result.darkroom.last_revealed_at is None
    assert result.darkroom.created_at == NOW
    assert repository.darkrooms["u1"] == result.darkroom


def test_get_darkroom_returns_existing_timer(darkroom_repository, darkroom_service) -> None:
    existing = _timer(NOW + timedelta(minutes=9))
    darkroom_repository.darkrooms["u1"] = existing

    result = darkroom_service.get_darkroom("u1")

    assert result.darkroom == existing


def test_get_darkroom_reports_store_failure(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.fail_reads = True

    result = darkroom_service.get_darkroom("u1")

    assert not result.success
    assert result.error == "darkroom store unavailable"


def test_get_darkroom_requires_user_id(darkroom_service) -> None:
    assert not darkroom_service.get_darkroom("").success


def test_reveal_window_never_reaches_upper_bound() -> None:
    service = DarkroomService(
        InMemoryDarkroomRepository(), FixedClock(random_value=0.999999)
    )

    next_reveal_at = service.calculate_next_reveal_time(NOW)

    assert NOW <= next_reveal_at < NOW + timedelta(minutes=15)


def test_is_ready_when_reveal_time_passed(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW - timedelta(hours=1))

    assert darkroom_service.is_ready_to_reveal("u1") is True


def test_is_ready_at_exact_reveal_time(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW)

    assert darkroom_service.is_ready_to_reveal("u1") is True


def test_is_not_ready_before_reveal_time(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW + timedelta(seconds=1))

    assert darkroom_service.is_ready_to_reveal("u1") is False


def test_is_not_ready_without_reveal_time(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(None)

    assert darkroom_service.is_ready_to_reveal("u1") is False


def test_is_not_ready_when_fetch_fails(darkroom_repository, darkroom_service) -> None:
    darkroom_repository.fail_reads = True

    assert darkroom_service.is_ready_to_reveal("u1") is False


def test_readiness_probe_does_not_mutate_timer(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW - timedelta(hours=1))

    darkroom_service.is_ready_to_reveal("u1")

    assert darkroom_repository.updates == []


def test_schedule_next_reveal_advances_timer(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW - timedelta(hours=1))

    result = darkroom_service.schedule_next_reveal("u1")

    timer = darkroom_repository.darkrooms["u1"]
    assert result.success
    assert result.next_reveal_at == NOW + timedelta(minutes=7.5)
    assert timer.next_reveal_at == result.next_reveal_at
    assert timer.last_revealed_at == NOW


def test_schedule_next_reveal_reports_missing_timer(darkroom_service) -> None:
    result = darkroom_service.schedule_next_reveal("ghost")

    assert not result.success
    assert "ghost" in (result.error or "")


def test_ensure_initialized_creates_timer(darkroom_repository, darkroom_service) -> None:
    result = darkroom_service.ensure_initialized("u1")

    assert result.success
    assert result.created
    assert not result.refreshed
    assert darkroom_service.is_ready_to_reveal("u1") is False


def test_ensure_initialized_refreshes_stale_timer(
    darkroom_repository, darkroom_service
) -> None:
    last_revealed = NOW - timedelta(days=2)
    darkroom_repository.darkrooms["u1"] = _timer(
        NOW - timedelta(days=1), last_revealed_at=last_revealed
    )

    result = darkroom_service.ensure_initialized("u1")

    timer = darkroom_repository.darkrooms["u1"]
    assert result.success
    assert result.refreshed
    assert not result.created
    assert timer.next_reveal_at > NOW
    assert timer.last_revealed_at == last_revealed


def test_ensure_initialized_refreshes_missing_reveal_time(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(None)

    result = darkroom_service.ensure_initialized("u1")

    assert result.refreshed
    assert darkroom_repository.darkrooms["u1"].next_reveal_at is not None


def test_ensure_initialized_keeps_future_timer(
    darkroom_repository, darkroom_service
) -> None:
    future = NOW + timedelta(minutes=4)
    darkroom_repository.darkrooms["u1"] = _timer(future)

    result = darkroom_service.ensure_initialized("u1")

    assert result.success
    assert not result.created
    assert not result.refreshed
    assert darkroom_repository.darkrooms["u1"].next_reveal_at == future
    assert darkroom_repository.updates == []


def test_ensure_initialized_reports_failure(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.fail_reads = True

    result = darkroom_service.ensure_initialized("u1")

    assert not result.success
    assert result.error


def test_record_triage_completion_stamps_darkroom(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.darkrooms["u1"] = _timer(NOW + timedelta(minutes=1))

    result = darkroom_service.record_triage_completion("u1", 2)

    timer = darkroom_repository.darkrooms["u1"]
    assert result.success
    assert timer.last_triage_completed_at == NOW
    assert timer.last_journaled_count == 2


def test_readiness_probe_creates_missing_timer(
    darkroom_repository, darkroom_service
) -> None:
    assert darkroom_service.is_ready_to_reveal("u1") is False

    created = darkroom_repository.darkrooms["u1"]
    assert NOW <= created.next_reveal_at < NOW + timedelta(minutes=15)
    assert created.last_revealed_at is None


def test_find_darkroom_does_not_create(darkroom_repository, darkroom_service) -> None:
    result = darkroom_service.find_darkroom("u1")

    assert result.success
    assert result.darkroom is None
    assert darkroom_repository.darkrooms == {}

    darkroom_repository.darkrooms["u1"] = _timer(NOW)
    assert darkroom_service.find_darkroom("u1").darkroom.next_reveal_at == NOW


def test_find_darkroom_reports_store_failure(
    darkroom_repository, darkroom_service
) -> None:
    darkroom_repository.fail_reads = True

    result = darkroom_service.find_darkroom("u1")

    assert not result.success
    assert result.error == "darkroom store unavailable"

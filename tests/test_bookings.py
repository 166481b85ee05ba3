"""Tests for the booking interval engine."""

import asyncio
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from travelin_api.errors import BookingConflictError, DateRangeInvalidError, ResourceNotFoundError
from travelin_api.repositories import booking as booking_repo
from travelin_api.schemas import BookingInterval, BookingRecord
from travelin_api.services import bookings as booking_service
from travelin_api.services.locks import PoiLockRegistry

TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = UUID("00000000-0000-0000-0000-000000000002")

POI_ID = "9CB40CB5D0"
TODAY = date(2025, 1, 1)


def _interval(start: str, end: str) -> BookingInterval:
    return BookingInterval(date.fromisoformat(start), date.fromisoformat(end))


def _record(start: str, end: str) -> BookingRecord:
    now = datetime.now(UTC)
    return BookingRecord(
        id=uuid4(),
        user_id=TEST_USER_ID,
        poi_id=POI_ID,
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end),
        created_at=now,
        updated_at=now,
    )


class TestBookingInterval:
    def test_end_must_follow_start(self):
        with pytest.raises(DateRangeInvalidError):
            _interval("2025-01-15", "2025-01-10")

    def test_same_day_is_rejected(self):
        with pytest.raises(DateRangeInvalidError):
            _interval("2025-01-15", "2025-01-15")

    def test_str(self):
        assert str(_interval("2025-03-01", "2025-03-05")) == "2025-03-01 to 2025-03-05"


class TestOverlapRule:
    def test_shared_boundary_day_conflicts(self):
        assert booking_service.intervals_overlap(
            _interval("2025-01-10", "2025-01-15"), _interval("2025-01-15", "2025-01-20")
        )

    def test_next_day_does_not_conflict(self):
        assert not booking_service.intervals_overlap(
            _interval("2025-01-10", "2025-01-15"), _interval("2025-01-16", "2025-01-20")
        )

    def test_candidate_ending_on_existing_start_conflicts(self):
        assert booking_service.intervals_overlap(
            _interval("2025-01-20", "2025-01-25"), _interval("2025-01-15", "2025-01-20")
        )

    def test_containment_conflicts(self):
        assert booking_service.intervals_overlap(
            _interval("2025-01-01", "2025-01-31"), _interval("2025-01-10", "2025-01-12")
        )
        assert booking_service.intervals_overlap(
            _interval("2025-01-10", "2025-01-12"), _interval("2025-01-01", "2025-01-31")
        )

    def test_find_conflict_returns_first_in_order(self):
        first = _record("2025-02-01", "2025-02-05")
        second = _record("2025-02-04", "2025-02-10")
        candidate = _interval("2025-02-03", "2025-02-08")
        assert booking_service.find_conflict([first, second], candidate) is first
        assert booking_service.find_conflict([], candidate) is None

    def test_availability_of_reports_conflict(self):
        existing = _record("2025-03-01", "2025-03-05")
        availability = booking_service.availability_of([existing], _interval("2025-03-05", "2025-03-10"))
        assert availability.available is False
        assert availability.conflict.id == existing.id
        assert availability.conflict.start_date == date(2025, 3, 1)


class TestCreateBooking:
    async def test_create_and_conflict(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        assert booking.poi_id == POI_ID
        assert booking.user_id == TEST_USER_ID
        assert booking.poi.name == "Casa Batlló"

        with pytest.raises(BookingConflictError) as exc_info:
            await booking_service.create_booking(
                db_session,
                OTHER_USER_ID,
                POI_ID,
                _interval("2025-03-05", "2025-03-10"),
                today=TODAY,
            )
        assert "(2025-03-01 to 2025-03-05)" in exc_info.value.detail
        assert exc_info.value.booking_id == booking.id
        assert exc_info.value.status == 409

    async def test_next_day_is_available(self, db_session, barcelona_pois):
        await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        booking = await booking_service.create_booking(
            db_session, OTHER_USER_ID, POI_ID, _interval("2025-03-06", "2025-03-10"), today=TODAY
        )
        assert booking.start_date == date(2025, 3, 6)

    async def test_other_poi_is_independent(self, db_session, barcelona_pois):
        interval = _interval("2025-03-01", "2025-03-05")
        await booking_service.create_booking(db_session, TEST_USER_ID, POI_ID, interval, today=TODAY)
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, "AF57D529B2", interval, today=TODAY
        )
        assert booking.poi_id == "AF57D529B2"

    async def test_past_start_date_rejected(self, db_session, barcelona_pois):
        with pytest.raises(DateRangeInvalidError, match="past"):
            await booking_service.create_booking(
                db_session,
                TEST_USER_ID,
                POI_ID,
                _interval("2025-03-01", "2025-03-05"),
                today=date(2025, 3, 2),
            )

    async def test_start_today_allowed(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session,
            TEST_USER_ID,
            POI_ID,
            _interval("2025-03-01", "2025-03-05"),
            today=date(2025, 3, 1),
        )
        assert booking.start_date == date(2025, 3, 1)

    async def test_missing_poi(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await booking_service.create_booking(
                db_session, TEST_USER_ID, "NOPE", _interval("2025-03-01", "2025-03-05"), today=TODAY
            )

    async def test_concurrent_overlapping_requests(self, session_factory, barcelona_pois):
        """Two simultaneous overlapping requests: exactly one wins."""
        interval = _interval("2025-06-01", "2025-06-07")

        async def attempt(user_id):
            async with session_factory() as session:
                return await booking_service.create_booking(
                    session, user_id, POI_ID, interval, today=TODAY
                )

        results = await asyncio.gather(
            attempt(TEST_USER_ID), attempt(OTHER_USER_ID), return_exceptions=True
        )

        created = [r for r in results if isinstance(r, BookingRecord)]
        conflicts = [r for r in results if isinstance(r, BookingConflictError)]
        assert len(created) == 1
        assert len(conflicts) == 1

        async with session_factory() as session:
            page = await booking_service.list_poi_bookings(session, POI_ID)
        assert page.total_count == 1


class TestAvailability:
    async def test_reports_conflict_then_free(self, db_session, barcelona_pois):
        existing = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )

        taken = await booking_service.check_availability(
            db_session, POI_ID, _interval("2025-03-05", "2025-03-10")
        )
        assert taken.available is False
        assert taken.conflict.id == existing.id
        assert taken.conflict.end_date == date(2025, 3, 5)

        free = await booking_service.check_availability(
            db_session, POI_ID, _interval("2025-03-06", "2025-03-10")
        )
        assert free.available is True
        assert free.conflict is None

    async def test_exclude_own_booking(self, db_session, barcelona_pois):
        existing = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        result = await booking_service.check_availability(
            db_session, POI_ID, _interval("2025-03-03", "2025-03-08"), exclude_booking_id=existing.id
        )
        assert result.available is True

    async def test_missing_poi(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await booking_service.check_availability(
                db_session, "NOPE", _interval("2025-03-01", "2025-03-05")
            )


class TestOwnership:
    async def test_cancel_by_other_user_is_not_found(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        with pytest.raises(ResourceNotFoundError, match="Booking not found"):
            await booking_service.cancel_booking(db_session, booking.id, OTHER_USER_ID)

        still_there = await booking_service.get_booking_for_user(db_session, booking.id, TEST_USER_ID)
        assert still_there.id == booking.id

    async def test_cancel_frees_the_dates(self, db_session, barcelona_pois):
        interval = _interval("2025-03-01", "2025-03-05")
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, interval, today=TODAY
        )
        await booking_service.cancel_booking(db_session, booking.id, TEST_USER_ID)

        availability = await booking_service.check_availability(db_session, POI_ID, interval)
        assert availability.available is True

        with pytest.raises(ResourceNotFoundError):
            await booking_service.cancel_booking(db_session, booking.id, TEST_USER_ID)

    async def test_get_other_users_booking_is_not_found(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        with pytest.raises(ResourceNotFoundError):
            await booking_service.get_booking_for_user(db_session, booking.id, OTHER_USER_ID)

    async def test_unknown_booking_is_not_found(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await booking_service.get_booking_for_user(db_session, uuid4(), TEST_USER_ID)


class TestReschedule:
    async def test_can_overlap_own_previous_dates(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        moved = await booking_service.reschedule_booking(
            db_session, booking.id, TEST_USER_ID, _interval("2025-03-03", "2025-03-08"), today=TODAY
        )
        assert moved.id == booking.id
        assert moved.start_date == date(2025, 3, 3)
        assert moved.end_date == date(2025, 3, 8)

    async def test_conflicts_with_other_booking(self, db_session, barcelona_pois):
        mine = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        await booking_service.create_booking(
            db_session, OTHER_USER_ID, POI_ID, _interval("2025-03-10", "2025-03-15"), today=TODAY
        )
        with pytest.raises(BookingConflictError):
            await booking_service.reschedule_booking(
                db_session, mine.id, TEST_USER_ID, _interval("2025-03-08", "2025-03-10"), today=TODAY
            )

    async def test_storage_rejection_is_conflict(self, db_session, barcelona_pois, monkeypatch):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )

        async def reject(*args, **kwargs):
            raise IntegrityError("UPDATE bookings", {}, Exception("exclusion violation"))

        monkeypatch.setattr(booking_repo, "update_booking_interval", reject)
        with pytest.raises(BookingConflictError):
            await booking_service.reschedule_booking(
                db_session, booking.id, TEST_USER_ID, _interval("2025-03-10", "2025-03-12"), today=TODAY
            )
        assert not booking_service.poi_locks.is_locked(POI_ID)

    async def test_other_user_cannot_reschedule(self, db_session, barcelona_pois):
        booking = await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-03-01", "2025-03-05"), today=TODAY
        )
        with pytest.raises(ResourceNotFoundError):
            await booking_service.reschedule_booking(
                db_session, booking.id, OTHER_USER_ID, _interval("2025-04-01", "2025-04-05"), today=TODAY
            )


class TestListings:
    async def test_user_bookings_sorted_by_start(self, db_session, barcelona_pois):
        for start, end in (("2025-05-01", "2025-05-03"), ("2025-04-01", "2025-04-03")):
            await booking_service.create_booking(
                db_session, TEST_USER_ID, POI_ID, _interval(start, end), today=TODAY
            )
        await booking_service.create_booking(
            db_session, OTHER_USER_ID, POI_ID, _interval("2025-06-01", "2025-06-03"), today=TODAY
        )

        page = await booking_service.list_user_bookings(db_session, TEST_USER_ID)
        assert page.total_count == 2
        assert [b.start_date for b in page.items] == [date(2025, 4, 1), date(2025, 5, 1)]
        assert all(b.poi is not None for b in page.items)

    async def test_poi_bookings(self, db_session, barcelona_pois):
        await booking_service.create_booking(
            db_session, TEST_USER_ID, POI_ID, _interval("2025-05-01", "2025-05-03"), today=TODAY
        )
        await booking_service.create_booking(
            db_session, OTHER_USER_ID, POI_ID, _interval("2025-04-01", "2025-04-03"), today=TODAY
        )
        page = await booking_service.list_poi_bookings(db_session, POI_ID, limit=1)
        assert page.total_count == 2
        assert page.items[0].start_date == date(2025, 4, 1)

    async def test_poi_bookings_missing_poi(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await booking_service.list_poi_bookings(db_session, "NOPE")


class TestPoiLockRegistry:
    async def test_hold_locks_and_releases(self):
        registry = PoiLockRegistry()
        async with registry.hold("A"):
            assert registry.is_locked("A")
            assert not registry.is_locked("B")
        assert not registry.is_locked("A")

    async def test_serializes_same_poi(self):
        registry = PoiLockRegistry()
        events = []

        async def worker(name):
            async with registry.hold("A"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("one"), worker("two"))
        assert events in (
            ["one-in", "one-out", "two-in", "two-out"],
            ["two-in", "two-out", "one-in", "one-out"],
        )

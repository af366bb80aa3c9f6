import asyncio
import threading

import pytest
from fastapi import BackgroundTasks

from warehub.core.exceptions import Forbidden, InvalidInput, InvalidTransition, NotFound
from warehub.modules.bookings import state_machine
from warehub.modules.bookings.repository import BookingsRepository
from warehub.modules.bookings.service import BookingsService
from warehub.shared.database.models import Booking, BookingEvent
from warehub.shared.enums import BookingStatus


def _events(db, booking_id):
    db.expire_all()
    return db.query(BookingEvent).filter(BookingEvent.booking_id == booking_id).order_by(BookingEvent.id).all()


class TestTransitionTable:
    @pytest.mark.parametrize("current, requested", [
        ("PENDING", "ACCEPTED"),
        ("PENDING", "REJECTED"),
        ("PENDING", "CANCELED"),
        ("ACCEPTED", "CANCELED"),
    ])
    def test_allowed(self, current, requested):
        assert state_machine.can_transition(current, requested)
        state_machine.ensure_transition(current, requested)

    @pytest.mark.parametrize("current, requested", [
        ("ACCEPTED", "REJECTED"),
        ("ACCEPTED", "PENDING"),
        ("REJECTED", "ACCEPTED"),
        ("CANCELED", "ACCEPTED"),
        ("PENDING", "PENDING"),
    ])
    def test_refused(self, current, requested):
        assert not state_machine.can_transition(current, requested)
        with pytest.raises(InvalidTransition) as exc:
            state_machine.ensure_transition(current, requested)
        assert exc.value.status_code == 422
        assert exc.value.detail == f"Invalid transition: {current} -> {requested}"

    def test_terminal_states(self):
        assert state_machine.is_terminal("REJECTED")
        assert state_machine.is_terminal("CANCELED")
        assert not state_machine.is_terminal("ACCEPTED")

    def test_parse_is_case_insensitive(self):
        assert state_machine.parse_status(" accepted ") is BookingStatus.ACCEPTED

    @pytest.mark.parametrize("raw", ["", None, "approved"])
    def test_unknown_status_is_bad_request(self, raw):
        with pytest.raises(InvalidInput):
            state_machine.parse_status(raw)


@pytest.fixture
def warehouse(owner, make_warehouse):
    return make_warehouse(owner)


@pytest.fixture
def booking(db, merchant, warehouse):
    return BookingsRepository(db).create_with_event(warehouse.id, merchant.id)


class TestCreateBooking:
    def test_new_booking_is_pending_with_one_event(self, db, merchant, warehouse, notifier):
        created = asyncio.run(BookingsService(db, notifier).create_booking(merchant, warehouse.id))

        assert created.status == "pending"
        events = _events(db, created.id)
        assert [e.status for e in events] == ["PENDING"]

    def test_owner_only_user_cannot_book(self, db, owner, warehouse, notifier):
        with pytest.raises(Forbidden):
            asyncio.run(BookingsService(db, notifier).create_booking(owner, warehouse.id))
        assert db.query(Booking).count() == 0

    def test_owner_who_is_also_merchant_can_book(self, db, make_user, warehouse, notifier):
        both = make_user(["WAREHOUSE_OWNER", "MERCHANT"])
        created = asyncio.run(BookingsService(db, notifier).create_booking(both, warehouse.id))
        assert created.status == "pending"

    @pytest.mark.parametrize("overrides", [
        {"is_approved": False},
        {"is_disabled_by_admin": True},
        {"status": "DRAFT"},
    ])
    def test_unbookable_warehouse_rejected(self, db, owner, merchant, make_warehouse, notifier, overrides):
        hidden = make_warehouse(owner, **overrides)

        with pytest.raises(InvalidInput) as exc:
            asyncio.run(BookingsService(db, notifier).create_booking(merchant, hidden.id))

        assert exc.value.detail == "Warehouse not bookable"
        assert db.query(Booking).count() == 0

    def test_missing_warehouse(self, db, merchant, notifier):
        with pytest.raises(NotFound):
            asyncio.run(BookingsService(db, notifier).create_booking(merchant, 999))


class TestTransitions:
    def test_cancel_then_accept_is_refused(self, db, owner, booking, notifier):
        service = BookingsService(db, notifier)

        result = asyncio.run(service.transition_booking(booking.id, "canceled", owner))
        assert result.status == "canceled"

        with pytest.raises(InvalidTransition):
            asyncio.run(service.transition_booking(booking.id, "ACCEPTED", owner))

        db.expire_all()
        assert db.get(Booking, booking.id).status == "CANCELED"
        assert [e.status for e in _events(db, booking.id)] == ["PENDING", "CANCELED"]

    def test_history_tracks_every_status_change(self, db, owner, booking, notifier):
        service = BookingsService(db, notifier)

        asyncio.run(service.transition_booking(booking.id, "accepted", owner))
        asyncio.run(service.transition_booking(booking.id, "canceled", owner))

        events = _events(db, booking.id)
        assert [e.status for e in events] == ["PENDING", "ACCEPTED", "CANCELED"]
        assert events[-1].status == db.get(Booking, booking.id).status

    def test_admin_can_transition(self, db, admin, booking, notifier):
        result = asyncio.run(BookingsService(db, notifier).transition_booking(booking.id, "rejected", admin))
        assert result.status == "rejected"

    def test_merchant_cannot_transition(self, db, merchant, booking, notifier):
        with pytest.raises(Forbidden):
            asyncio.run(BookingsService(db, notifier).transition_booking(booking.id, "canceled", merchant))
        assert [e.status for e in _events(db, booking.id)] == ["PENDING"]

    def test_other_owner_cannot_transition(self, db, make_user, booking, notifier):
        stranger = make_user(["WAREHOUSE_OWNER"])
        with pytest.raises(Forbidden):
            asyncio.run(BookingsService(db, notifier).transition_booking(booking.id, "accepted", stranger))

    def test_unknown_status(self, db, owner, booking, notifier):
        with pytest.raises(InvalidInput):
            asyncio.run(BookingsService(db, notifier).transition_booking(booking.id, "approved", owner))

    def test_missing_booking(self, db, owner, notifier):
        with pytest.raises(NotFound):
            asyncio.run(BookingsService(db, notifier).transition_booking(999, "accepted", owner))


class TestOwnerNotes:
    def test_note_is_recorded_and_emailed(self, db, owner, merchant, booking, notifier):
        tasks = BackgroundTasks()

        asyncio.run(BookingsService(db, notifier).attach_booking_note(
            booking.id, "Gate 3, after 10am", owner, background_tasks=tasks
        ))

        events = _events(db, booking.id)
        assert [(e.status, e.note) for e in events] == [
            ("PENDING", None),
            ("PENDING", "OWNER_MSG: Gate 3, after 10am"),
        ]
        assert db.get(Booking, booking.id).status == "PENDING"

        # Delivery is deferred until the background tasks run
        assert notifier.sent == []
        asyncio.run(tasks())
        assert notifier.sent == [{
            "to": merchant.email,
            "subject": f"Message about booking #{booking.id}",
            "body": "Gate 3, after 10am",
        }]

    def test_explicit_recipient_overrides_account_email(self, db, owner, booking, notifier):
        asyncio.run(BookingsService(db, notifier).attach_booking_note(
            booking.id, "hi", owner, merchant_email="ops@merchant.example"
        ))
        assert notifier.sent[0]["to"] == "ops@merchant.example"

    def test_direct_send_runs_off_the_event_loop_thread(self, db, owner, booking):
        class ThreadNotifier:
            def __init__(self):
                self.threads = []

            def send(self, message):
                self.threads.append(threading.get_ident())
                return True

        notifier = ThreadNotifier()
        loop_threads = []

        async def attach():
            loop_threads.append(threading.get_ident())
            await BookingsService(db, notifier).attach_booking_note(booking.id, "hi", owner)

        asyncio.run(attach())

        assert len(notifier.threads) == 1
        assert notifier.threads[0] != loop_threads[0]

    def test_merchant_cannot_attach_note(self, db, merchant, booking, notifier):
        with pytest.raises(Forbidden):
            asyncio.run(BookingsService(db, notifier).attach_booking_note(booking.id, "hi", merchant))
        assert notifier.sent == []


class TestReads:
    def test_detail_carries_history_and_owner_contact(self, db, owner, merchant, booking, notifier):
        service = BookingsService(db, notifier)
        asyncio.run(service.transition_booking(booking.id, "accepted", owner))

        detail = asyncio.run(service.get_booking_detail(booking.id, merchant))

        assert detail.status == "accepted"
        assert [h.status for h in detail.status_history] == ["pending", "accepted"]
        assert detail.warehouse.owner.email == owner.email
        assert detail.merchant.id == merchant.id

    def test_detail_hidden_from_unrelated_merchant(self, db, make_user, booking, notifier):
        stranger = make_user(["MERCHANT"])
        with pytest.raises(Forbidden):
            asyncio.run(BookingsService(db, notifier).get_booking_detail(booking.id, stranger))

    def test_scoped_lists(self, db, owner, merchant, admin, booking, notifier):
        service = BookingsService(db, notifier)

        assert [b.id for b in asyncio.run(service.list_for_merchant(merchant.id, merchant))] == [booking.id]
        assert [b.id for b in asyncio.run(service.list_for_owner(owner.id, owner))] == [booking.id]
        assert [b.id for b in asyncio.run(service.list_for_owner(owner.id, admin))] == [booking.id]

        with pytest.raises(Forbidden):
            asyncio.run(service.list_for_merchant(merchant.id, owner))
        with pytest.raises(Forbidden):
            asyncio.run(service.list_for_owner(owner.id, merchant))

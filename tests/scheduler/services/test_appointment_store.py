from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from scheduler.services import appointment_store
from tests.factories import MONDAY, NEXT_MONDAY, TUESDAY, add_appointment, add_representative, add_user


def test_insert_forces_pending_status(db, representative, requester) -> None:
    appointment = appointment_store.insert(
        db, requester.id, representative.id, MONDAY, '10:00', 'Visa', 'details',
    )
    db.commit()

    assert appointment.status == 'pending'
    assert appointment.created_at == appointment.updated_at


def test_active_slot_index_rejects_duplicate_active_booking(db, representative, requester) -> None:
    other = add_user(db, 'other@example.com')
    add_appointment(db, requester.id, representative.id, MONDAY, '10:00', status='accepted')

    with pytest.raises(IntegrityError):
        add_appointment(db, other.id, representative.id, MONDAY, '10:00', status='pending')
    db.rollback()


def test_active_slot_index_ignores_closed_appointments(db, representative, requester) -> None:
    other = add_user(db, 'other@example.com')
    add_appointment(db, requester.id, representative.id, MONDAY, '10:00', status='cancelled')
    add_appointment(db, requester.id, representative.id, MONDAY, '10:00', status='rejected')

    add_appointment(db, other.id, representative.id, MONDAY, '10:00', status='pending')

    assert appointment_store.active_times_for_day(db, representative.id, MONDAY) == {'10:00'}


def test_active_lookups_use_only_active_statuses(db, representative, requester) -> None:
    other = add_user(db, 'other@example.com')
    add_appointment(db, requester.id, representative.id, MONDAY, '09:00', status='pending')
    add_appointment(db, other.id, representative.id, MONDAY, '09:30', status='accepted')
    add_appointment(db, other.id, representative.id, MONDAY, '10:00', status='completed')

    assert appointment_store.active_times_for_day(db, representative.id, MONDAY) == {'09:00', '09:30'}
    assert appointment_store.count_active_for_day(db, representative.id, MONDAY) == 2


def test_list_for_provider_sorts_by_date_then_time(db, representative, requester) -> None:
    other = add_user(db, 'other@example.com', full_name='Other Person')
    add_appointment(db, requester.id, representative.id, NEXT_MONDAY, '09:00', status='accepted')
    add_appointment(db, other.id, representative.id, MONDAY, '14:00', status='pending')
    add_appointment(db, requester.id, representative.id, MONDAY, '09:30', status='accepted')
    add_appointment(db, other.id, representative.id, TUESDAY, '08:00', status='rejected')

    views = appointment_store.list_for_provider(db, representative.id)

    assert [(view.requested_date, view.requested_time) for view in views] == [
        (MONDAY, '09:30'),
        (MONDAY, '14:00'),
        (TUESDAY, '08:00'),
        (NEXT_MONDAY, '09:00'),
    ]
    assert views[1].user.full_name == 'Other Person'
    assert views[1].user.phone == '+966500000000'


def test_list_for_provider_filters_by_date_and_status(db, representative, requester) -> None:
    other = add_user(db, 'other@example.com')
    add_appointment(db, requester.id, representative.id, MONDAY, '09:00', status='accepted')
    add_appointment(db, other.id, representative.id, MONDAY, '10:00', status='pending')
    add_appointment(db, other.id, representative.id, TUESDAY, '10:00', status='accepted')

    views = appointment_store.list_for_provider(db, representative.id, MONDAY, 'accepted')

    assert [(view.requested_date, view.requested_time) for view in views] == [(MONDAY, '09:00')]


def test_list_for_provider_excludes_other_representatives(db, representative, requester) -> None:
    other_rep = add_representative(db, email='other-rep@example.com')
    add_appointment(db, requester.id, other_rep.id, MONDAY, '09:00')

    assert appointment_store.list_for_provider(db, representative.id) == []


def test_list_for_requester_is_newest_first_with_representative(db, representative, requester) -> None:
    first = add_appointment(db, requester.id, representative.id, MONDAY, '09:00', status='accepted')
    second = add_appointment(db, requester.id, representative.id, TUESDAY, '09:00', status='pending')
    first.created_at = datetime(2025, 12, 1, 9, 0)
    second.created_at = datetime(2025, 12, 2, 9, 0)
    db.commit()

    views = appointment_store.list_for_requester(db, requester.id)

    assert [view.id for view in views] == [second.id, first.id]
    assert views[0].representative.id == representative.id
    assert views[0].representative.department == 'Visas'
    assert views[0].representative.user.email == 'rep@example.com'


def test_list_for_requester_status_filter(db, representative, requester) -> None:
    add_appointment(db, requester.id, representative.id, MONDAY, '09:00', status='accepted')
    pending = add_appointment(db, requester.id, representative.id, TUESDAY, '09:00', status='pending')

    views = appointment_store.list_for_requester(db, requester.id, 'pending')

    assert [view.id for view in views] == [pending.id]

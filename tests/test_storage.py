from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from eventsphere.auth.passwords import verify_password
from eventsphere.core.errors import DuplicateUserError
from eventsphere.models.event import EventCategory, EventType
from eventsphere.models.user import UserRole
from eventsphere.services.filters import filter_by_date


def test_create_user_fills_defaults_and_hashes_password(storage) -> None:
    user = storage.create_user({
        'username': 'dana',
        'password': 'secret-pass',
        'email': 'dana@campus.edu',
        'first_name': 'Dana',
        'last_name': 'Lee',
    })

    assert user.id == 1
    assert user.role == UserRole.STUDENT
    assert user.department is None
    assert user.years_of_experience is None
    assert user.password_hash != 'secret-pass'
    assert verify_password(user.password_hash, 'secret-pass')


def test_get_user_by_username_and_email(storage, make_user) -> None:
    created = make_user('erin')

    assert storage.get_user_by_username('erin').id == created.id
    assert storage.get_user_by_email('erin@campus.edu').id == created.id
    assert storage.get_user_by_username('nobody') is None
    assert storage.get_user(999) is None


def test_update_user_merges_partial_changes(storage, make_user) -> None:
    user = make_user('finn')

    updated = storage.update_user(user.id, {'bio': 'Robotics club', 'password': 'new-password'})

    assert updated.bio == 'Robotics club'
    assert updated.first_name == 'Finn'
    assert verify_password(updated.password_hash, 'new-password')
    assert storage.update_user(999, {'bio': 'x'}) is None


def test_create_event_round_trips_fields(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    event = make_event(organizer.id, type=EventType.PAID, price=15, banner_image='banner.png')

    fetched = storage.get_event(event.id)

    assert fetched.title == 'Intro to Rust'
    assert fetched.description == 'Ownership and borrowing from scratch'
    assert fetched.location == 'Lab 3'
    assert fetched.event_date == datetime(2030, 3, 14, 18, 0)
    assert fetched.category == EventCategory.TECHNICAL
    assert fetched.type == EventType.PAID
    assert fetched.price == 15
    assert fetched.capacity == 10
    assert fetched.banner_image == 'banner.png'
    assert fetched.organizer_id == organizer.id


def test_free_event_price_is_coerced_to_zero(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)

    event = make_event(organizer.id, type=EventType.FREE, price=50)

    assert storage.get_event(event.id).price == 0


def test_update_event_to_free_resets_price(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    event = make_event(organizer.id, type=EventType.PAID, price=20)

    updated = storage.update_event(event.id, {'type': EventType.FREE})

    assert updated.price == 0
    assert updated.title == 'Intro to Rust'


def test_event_lookups_by_category_and_organizer(storage, make_user, make_event) -> None:
    alice = make_user('alice', role=UserRole.EVENT_MANAGER)
    gus = make_user('gus', role=UserRole.EVENT_MANAGER)
    technical = make_event(alice.id)
    social = make_event(gus.id, title='Games Night', category=EventCategory.NON_TECHNICAL)

    assert [event.id for event in storage.get_events_by_category(EventCategory.NON_TECHNICAL)] == [social.id]
    assert [event.id for event in storage.get_events_by_organizer(alice.id)] == [technical.id]


def test_deleted_ids_are_never_reused(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    first = make_event(organizer.id)
    second = make_event(organizer.id)

    assert storage.delete_event(second.id) is True
    assert storage.delete_event(second.id) is False

    third = make_event(organizer.id)
    assert third.id > second.id > first.id


def test_registration_defaults_and_lookup(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    student = make_user('bob')
    event = make_event(organizer.id)

    registration = storage.create_registration({'user_id': student.id, 'event_id': event.id})

    assert registration.has_paid is False
    assert registration.has_attended is False
    assert registration.registration_date is not None
    assert storage.get_registration_by_user_and_event(student.id, event.id).id == registration.id
    assert storage.count_registrations_for_event(event.id) == 1
    assert storage.delete_registration(registration.id) is True
    assert storage.get_registration(registration.id) is None


def test_notifications_start_unread_and_can_be_marked_read(storage, make_user) -> None:
    student = make_user('bob')

    notification = storage.create_notification({'user_id': student.id, 'message': 'Hello'})

    assert notification.is_read is False
    assert notification.event_id is None
    assert storage.mark_notification_as_read(notification.id).is_read is True
    assert storage.get_notification(notification.id).is_read is True
    assert storage.mark_notification_as_read(999) is None


def test_returned_records_are_detached_copies(storage, make_user) -> None:
    user = make_user('hana')

    user.bio = 'changed locally'

    assert storage.get_user(user.id).bio is None


def test_analytics_counts(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    student = make_user('bob')
    upcoming = make_event(organizer.id)
    make_event(organizer.id, event_date=datetime(2000, 1, 1))
    attended = storage.create_registration({'user_id': student.id, 'event_id': upcoming.id})
    storage.update_registration(attended.id, {'has_attended': True})

    assert storage.get_registered_events_count(student.id) == 1
    assert storage.get_user_attendance_count(student.id) == 1
    assert storage.get_event_attendance_count(upcoming.id) == 1
    assert storage.get_upcoming_events_count(now=datetime(2020, 1, 1)) == 1


def test_unique_username_is_enforced_by_the_store(storage, make_user) -> None:
    make_user('ivy')

    with pytest.raises(DuplicateUserError) as exception_info:
        storage.create_user({
            'username': 'ivy',
            'password': 'password',
            'email': 'ivy-other@campus.edu',
            'first_name': 'Ivy',
            'last_name': 'Again',
        })

    assert exception_info.value.message == 'Username already exists'


def test_update_user_to_taken_email_is_rejected(storage, make_user) -> None:
    bob = make_user('bob')
    make_user('carol')

    with pytest.raises(DuplicateUserError) as exception_info:
        storage.update_user(bob.id, {'email': 'carol@campus.edu'})

    assert exception_info.value.message == 'Email already exists'
    assert storage.get_user(bob.id).email == 'bob@campus.edu'


def test_registration_and_notification_commit_together(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    student = make_user('bob')
    event = make_event(organizer.id)

    with pytest.raises(IntegrityError):
        storage.create_registration_with_notification(
            {'user_id': student.id, 'event_id': event.id},
            {'user_id': student.id, 'message': None, 'event_id': event.id},
        )

    assert storage.get_registrations_by_event(event.id) == []
    assert storage.get_notifications_by_user(student.id) == []


def test_event_starting_now_counts_as_upcoming(storage, make_user, make_event) -> None:
    organizer = make_user('alice', role=UserRole.EVENT_MANAGER)
    starts = datetime(2030, 3, 14, 18, 0)
    event = make_event(organizer.id, event_date=starts)

    assert storage.get_upcoming_events_count(now=starts) == 1
    assert filter_by_date([storage.get_event(event.id)], 'upcoming', now=starts)[0].id == event.id

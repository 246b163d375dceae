from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from eventsphere.main import create_app
from eventsphere.models.event import EventCategory, EventType
from eventsphere.models.user import UserRole
from eventsphere.services.registration import EventLockRegistry
from eventsphere.storage import Storage


@pytest.fixture
def storage():
    store = Storage('sqlite://')
    store.init()
    try:
        yield store
    finally:
        store.dispose()


@pytest.fixture
def locks():
    return EventLockRegistry()


@pytest.fixture
def make_user(storage):
    def _make_user(username: str, role: UserRole = UserRole.STUDENT, password: str = 'password'):
        return storage.create_user({
            'username': username,
            'password': password,
            'email': f'{username}@campus.edu',
            'first_name': username.title(),
            'last_name': 'Tester',
            'role': role,
        })

    return _make_user


@pytest.fixture
def make_event(storage):
    def _make_event(organizer_id: int, **overrides):
        data = {
            'title': 'Intro to Rust',
            'description': 'Ownership and borrowing from scratch',
            'location': 'Lab 3',
            'event_date': datetime(2030, 3, 14, 18, 0),
            'category': EventCategory.TECHNICAL,
            'type': EventType.FREE,
            'capacity': 10,
            'organizer_id': organizer_id,
        }
        data.update(overrides)
        return storage.create_event(data)

    return _make_event


@pytest.fixture
def app():
    application = create_app(database_url='sqlite://', seed=False)
    try:
        yield application
    finally:
        application.state.storage.dispose()


@pytest.fixture
def make_client(app):
    def _make_client() -> TestClient:
        return TestClient(app)

    return _make_client

"""Sample accounts loaded into a fresh store.

Both accounts use the password ``password``; they exist for local
development only and are skipped when ``SEED_SAMPLE_DATA`` is off.
"""

import logging

from eventsphere.models.user import UserRole
from eventsphere.storage import Storage

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {
        'username': 'manager',
        'password': 'password',
        'email': 'manager@example.com',
        'first_name': 'Event',
        'last_name': 'Manager',
        'role': UserRole.EVENT_MANAGER,
        'department': 'Computer Science',
        'bio': 'I organize tech events',
        'company': 'TechEvents Inc.',
        'years_of_experience': 5,
    },
    {
        'username': 'student',
        'password': 'password',
        'email': 'student@example.com',
        'first_name': 'Student',
        'last_name': 'User',
        'role': UserRole.STUDENT,
        'department': 'Engineering',
        'bio': 'I love attending events',
    },
]


def seed_sample_data(storage: Storage) -> int:
    created = 0
    for sample in SAMPLE_USERS:
        if storage.get_user_by_username(sample['username']) is not None:
            continue
        storage.create_user(sample)
        created += 1
    if created:
        logger.info('Seeded %s sample accounts', created)
    return created

"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Clocks, usernames, emails
    - task_fixtures.py: Task, attachment and task event factories
    - auth_fixtures.py: Auth config, users and tokens
"""

from .common import (
    FakeClock,
    make_email,
    make_username,
    make_timestamp,
)

from .task_fixtures import (
    make_task,
    make_task_row,
    make_task_create_request,
    make_task_update_request,
    make_attachment,
    make_task_event_payload,
)

from .auth_fixtures import (
    TEST_JWT_SECRET,
    make_auth_config,
    make_auth_user,
)

__all__ = [
    "FakeClock",
    "make_email",
    "make_username",
    "make_timestamp",
    "make_task",
    "make_task_row",
    "make_task_create_request",
    "make_task_update_request",
    "make_attachment",
    "make_task_event_payload",
    "TEST_JWT_SECRET",
    "make_auth_config",
    "make_auth_user",
]

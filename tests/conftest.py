from datetime import datetime, timedelta, timezone

import pytest

from flowspec.capture.record import NormalizedRecord

BASE_TIME = datetime(2026, 2, 21, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def user_records():
    """Two user lookups and one user creation, all authenticated."""
    return [
        NormalizedRecord(
            method="GET",
            path="/api/users/123",
            status=200,
            timestamp=BASE_TIME,
            headers={"authorization": ("Bearer token",)},
        ),
        NormalizedRecord(
            method="GET",
            path="/api/users/456",
            status=200,
            timestamp=BASE_TIME + timedelta(minutes=1),
            headers={"authorization": ("Bearer token",)},
        ),
        NormalizedRecord(
            method="POST",
            path="/api/users",
            status=201,
            timestamp=BASE_TIME + timedelta(minutes=2),
            headers={"authorization": ("Bearer token",), "content-type": ("application/json",)},
        ),
    ]

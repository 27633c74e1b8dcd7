"""
Schema helpers and validation rules.
"""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.schemas.schemas import (
    ApplicationStatusUpdate, DriveCreate, NotificationCreate, SignupRequest,
    parse_round, to_naive_utc
)


@pytest.mark.parametrize("value, expected", [
    (0, 0), (1, 1), (1.4, 1), (1.5, 2), (2.5, 3), ("3", 3), ("3.7", 4),
])
def test_parse_round_half_up(value, expected):
    assert parse_round(value) == expected


@pytest.mark.parametrize("value", ["abc", float("nan"), float("inf")])
def test_parse_round_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_round(value)


def test_to_naive_utc():
    aware = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2030, 1, 1, 10, 0)
    assert to_naive_utc(datetime(2030, 1, 1)) == datetime(2030, 1, 1)
    assert to_naive_utc(None) is None


def test_status_update_rejects_non_numeric_round():
    with pytest.raises(ValidationError):
        ApplicationStatusUpdate(status="shortlisted", current_round="two")


def test_drive_requires_branch():
    with pytest.raises(ValidationError):
        DriveCreate(
            company_id=1, title="SDE", description="d", requirements="r",
            eligible_branches=[], minimum_percentage=60,
            ctc_range={"min": 1, "max": 2}, number_of_rounds=1,
            drive_date=datetime(2030, 1, 10), last_date_to_apply=datetime(2030, 1, 5),
        )


def test_notification_recipients_shapes():
    assert NotificationCreate(title="t", message="m", recipients="placed").recipients == "placed"
    assert NotificationCreate(title="t", message="m", recipients=[3, 4]).recipients == [3, 4]
    with pytest.raises(ValidationError):
        NotificationCreate(title="t", message="m", recipients="everyone")


def test_signup_mobile_number_format():
    with pytest.raises(ValidationError):
        SignupRequest(
            name="Asha", email="asha@college.edu", password="secret123",
            branch="Civil", percentage=70, roll_number="CE01", mobile_number="12345",
        )

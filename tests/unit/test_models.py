from datetime import date, datetime, timedelta, timezone

import pytest

from expocrm.models.common import parse_date, parse_datetime, parse_uuid
from expocrm.models.contact import FollowUpStatus
from expocrm.models.event import Event
from expocrm.models.target_company import TargetCompany, sort_targets
from expocrm.models.user_profile import UserProfile


class TestEventStatus:

    def test_no_start_date_is_upcoming(self):
        assert Event(name="Expo").derive_status(date(2025, 3, 10)) == "upcoming"

    def test_single_day_event(self):
        event = Event(name="Expo", start_date=date(2025, 3, 10))
        assert event.derive_status(date(2025, 3, 9)) == "upcoming"
        assert event.derive_status(date(2025, 3, 10)) == "ongoing"
        assert event.derive_status(date(2025, 3, 11)) == "completed"

    def test_multi_day_event_is_inclusive(self):
        event = Event(name="Expo", start_date=date(2025, 3, 10), end_date=date(2025, 3, 12))
        assert event.derive_status(date(2025, 3, 12)) == "ongoing"
        assert event.derive_status(date(2025, 3, 13)) == "completed"


def test_sort_targets_by_priority_then_newest():
    now = datetime(2025, 3, 1, tzinfo=timezone.utc)
    low = TargetCompany(priority="low", created_at=now + timedelta(days=5))
    high_old = TargetCompany(priority="high", created_at=now)
    high_new = TargetCompany(priority="high", created_at=now + timedelta(days=1))
    medium = TargetCompany(priority="medium", created_at=now)

    assert sort_targets([low, high_old, medium, high_new]) == [high_new, high_old, medium, low]


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ("", None),
    ("followed_up", FollowUpStatus.FOLLOWED_UP),
    ("Contacted", FollowUpStatus.NEEDS_FOLLOWUP),
    ("ignore", FollowUpStatus.NOT_CONTACTED),
])
def test_follow_up_status_normalize(value, expected):
    assert FollowUpStatus.normalize(value) == expected


class TestParsers:

    def test_parse_datetime_is_aware(self):
        parsed = parse_datetime("2025-03-10T09:30:00")
        assert parsed.tzinfo is not None

    def test_parse_datetime_accepts_z_suffix(self):
        assert parse_datetime("2025-03-10T09:30:00Z") == datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)

    def test_parse_date(self):
        assert parse_date("2025-03-10") == date(2025, 3, 10)

    def test_parse_uuid_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_uuid("not-a-uuid")


class TestProfileContext:

    def test_company_profile(self):
        profile = UserProfile(
            profile_type="company",
            name="Acme",
            industry="robotics",
            location="Berlin",
            value_proposition="Faster assembly lines",
        )
        assert profile.to_context() == (
            "I represent Acme. in the robotics industry. based in Berlin. "
            "\nOur value proposition: Faster assembly lines"
        )

    def test_employee_profile(self):
        profile = UserProfile(
            profile_type="employee", name="Ana", representing_company="Acme", employee_role="Sales Lead"
        )
        assert profile.to_context() == "I am Ana from Acme. working as Sales Lead"

    def test_individual_profile(self):
        assert UserProfile(name="Ana").to_context() == "I am Ana"

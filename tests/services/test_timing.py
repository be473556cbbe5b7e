from datetime import datetime, timedelta
from types import SimpleNamespace

from govdash.services.timing import (
    derive_status,
    format_address,
    is_voting_active,
    is_voting_ended,
    is_voting_started,
    time_remaining,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)


def window(start_offset, end_offset):
    return SimpleNamespace(
        start_date=NOW + timedelta(hours=start_offset),
        end_date=NOW + timedelta(hours=end_offset),
    )


def test_voting_window_checks():
    open_proposal = window(-1, 1)
    assert is_voting_started(open_proposal, NOW)
    assert not is_voting_ended(open_proposal, NOW)
    assert is_voting_active(open_proposal, NOW)

    upcoming = window(1, 2)
    assert not is_voting_started(upcoming, NOW)
    assert not is_voting_active(upcoming, NOW)

    finished = window(-2, -1)
    assert is_voting_ended(finished, NOW)
    assert not is_voting_active(finished, NOW)


def test_derive_status_from_start_date():
    assert derive_status(NOW - timedelta(seconds=1), NOW) == "active"
    assert derive_status(NOW, NOW) == "active"
    assert derive_status(NOW + timedelta(minutes=5), NOW) == "pending"


def test_time_remaining_text():
    assert time_remaining(NOW - timedelta(minutes=1), NOW) == "Ended"
    assert time_remaining(NOW, NOW) == "Ended"
    assert time_remaining(NOW + timedelta(days=3, hours=2), NOW) == "3 days left"
    assert time_remaining(NOW + timedelta(days=1), NOW) == "1 day left"
    assert time_remaining(NOW + timedelta(hours=5, minutes=10), NOW) == "5 hours left"
    assert time_remaining(NOW + timedelta(minutes=1, seconds=5), NOW) == "1 minute left"
    assert time_remaining(NOW + timedelta(seconds=30), NOW) == "Ending soon"


def test_format_address():
    address = "0x1234567890123456789012345678901234567890"
    assert format_address(address) == "0x1234...7890"
    assert format_address("") == ""
    assert format_address(None) == ""

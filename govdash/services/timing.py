from datetime import datetime, timezone


def utcnow():
    # Naive UTC, matching what SQLite hands back for DateTime columns.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_voting_started(proposal, now=None):
    return (now or utcnow()) >= proposal.start_date


def is_voting_ended(proposal, now=None):
    return (now or utcnow()) > proposal.end_date


def is_voting_active(proposal, now=None):
    now = now or utcnow()
    return is_voting_started(proposal, now) and not is_voting_ended(proposal, now)


def derive_status(start_date, now=None):
    return "active" if (now or utcnow()) >= start_date else "pending"


def _plural(value, unit):
    return f"{value} {unit}{'s' if value != 1 else ''} left"


def time_remaining(end_date, now=None):
    seconds_left = (end_date - (now or utcnow())).total_seconds()
    if seconds_left <= 0:
        return "Ended"

    days, rest = divmod(int(seconds_left), 24 * 60 * 60)
    hours, rest = divmod(rest, 60 * 60)
    minutes = rest // 60

    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    if minutes > 0:
        return _plural(minutes, "minute")
    return "Ending soon"


def format_address(address):
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"

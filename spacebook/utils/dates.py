from datetime import datetime, timezone


def utcnow():
    """Naive UTC timestamp, the form every datetime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value):
    """
    Parse an ISO-8601 string into a naive UTC datetime.
    Values carrying an offset are converted to UTC; naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value:
            raise ValueError(f"Invalid datetime: {value!r}")
        # fromisoformat only accepts the 'Z' suffix from 3.11 on
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        parsed = datetime.fromisoformat(value)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value):
    if 'T' in value:
        return datetime.fromisoformat(value).date()
    return datetime.strptime(value, "%Y-%m-%d").date()

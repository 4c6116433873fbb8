from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def naive_utcnow() -> datetime:
    # for "timestamp without time zone" columns
    return utcnow().replace(tzinfo=None)


def as_utc(value: datetime):
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)

from datetime import datetime, timezone


def utcnow() -> datetime:
    # DB에는 naive UTC로 저장한다.
    return datetime.now(timezone.utc).replace(tzinfo=None)

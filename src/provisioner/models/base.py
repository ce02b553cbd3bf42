from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    Platform columns are TIMESTAMP WITHOUT TIME ZONE and hold UTC by
    convention, so tzinfo is stripped before writing.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def utc_ago(seconds: float) -> datetime:
    """Naive UTC time ``seconds`` in the past (stale-claim cutoffs)."""
    return utc_now() - timedelta(seconds=seconds)

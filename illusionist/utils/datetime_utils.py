"""
Bar-time parsing for the CLI and config layers.

Start and --from times are wall-clock datetimes. Naive input stays naive;
an explicit offset (including a trailing Z) is kept as tzinfo, which the
schedules and generators carry through unchanged.
"""

from datetime import date, datetime, time

from ..core.types import ConfigurationError


BAR_TIME_FORMATS = "YYYY-MM-DD, YYYY-MM-DD HH:MM[:SS] or YYYY-MM-DDTHH:MM[:SS], optionally ending in Z or +HH:MM"


def parse_bar_time(value: datetime | date | str | None, param_name: str = "time") -> datetime | None:
    """
    Parse a bar time.

    Args:
        value: datetime, date (midnight), ISO string, or None/blank
        param_name: Option name used in error messages

    Returns:
        Parsed datetime, or None when no value was given

    Raises:
        ConfigurationError: If the value cannot be parsed
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(0, 0))
    if not isinstance(value, str):
        raise ConfigurationError(
            f"Invalid {param_name} type: expected datetime or string, got {type(value).__name__}"
        )

    text = value.strip()
    if not text:
        return None

    # fromisoformat only learned "Z" in 3.11
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ConfigurationError(f"Invalid {param_name}: '{value}'. Use {BAR_TIME_FORMATS}") from None


def default_start(now: datetime | None = None) -> datetime:
    """Today's date at 09:00 (local wall clock)."""
    now = now or datetime.now()
    return datetime.combine(now.date(), time(9, 0))

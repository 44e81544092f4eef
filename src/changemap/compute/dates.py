"""Lenient date coercion for event dates and raw_data payload fields.

Municipal datasets mix ISO timestamps ("2024-03-01T00:00:00.000") with
US-style dates ("03/15/2019"). Anything that does not parse is treated
as absent rather than raised.
"""

import logging
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Fill missing month/day ("2024" → 2024-01-01) without depending on today.
# The years differ so a string without a year ("May", "12") can be detected.
_PARSE_DEFAULT = datetime(1900, 1, 1)
_PARSE_DEFAULT_ALT = datetime(1901, 1, 1)


def parse_date(value: Any) -> date | None:
    """Coerce a date-like value to a ``date``, or None if it isn't one."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        parsed = date_parser.parse(text, default=_PARSE_DEFAULT)
        if parsed.year != date_parser.parse(text, default=_PARSE_DEFAULT_ALT).year:
            logger.debug("Ignoring date without a year %r", value)
            return None
    except (ValueError, OverflowError):
        logger.debug("Ignoring unparseable date %r", value)
        return None
    return parsed.date()


def raw_field_date(raw_data: dict[str, Any] | None, key: str) -> date | None:
    """Read ``raw_data[key]`` as a date. Missing payload or field → None."""
    if not raw_data:
        return None
    return parse_date(raw_data.get(key))

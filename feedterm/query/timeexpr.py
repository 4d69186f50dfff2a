"""Absolute and relative time literals used by ``newer:``, ``older:`` etc.

Accepted forms:

* relative: ``"2 days ago"``, ``"1 week"``, ``"+3 hours"``, ``"-90 min"``,
  ``"last month"``, ``"next week"``, ``"1 year 2 months ago"``
* named: ``"now"``, ``"today"``, ``"yesterday"``, ``"tomorrow"``
* absolute: anything dateutil understands, e.g. ``"2024-05-01"`` or
  ``"2024-05-01 13:30 +02:00"``; values without a zone are local time

All results are timezone-aware UTC datetimes.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

_UNITS = {
    "s": "seconds",
    "sec": "seconds",
    "secs": "seconds",
    "second": "seconds",
    "seconds": "seconds",
    "min": "minutes",
    "mins": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "h": "hours",
    "hour": "hours",
    "hours": "hours",
    "d": "days",
    "day": "days",
    "days": "days",
    "week": "weeks",
    "weeks": "weeks",
    "fortnight": "fortnights",
    "fortnights": "fortnights",
    "month": "months",
    "months": "months",
    "year": "years",
    "years": "years",
}

_ORDINAL_WORDS = {"a": 1, "an": 1, "this": 0, "last": -1, "next": 1}

_RELATIVE_ITEM = re.compile(
    r"\s*(?:(?P<sign>[+-])?\s*(?P<amount>\d+)|(?P<word>an|a|this|last|next)\s)?"
    r"\s*(?P<unit>[a-z]+)"
)
_AGO = re.compile(r"\s*ago\s*$")

_NAMED = {
    "now": relativedelta(),
    "today": relativedelta(),
    "yesterday": relativedelta(days=-1),
    "tomorrow": relativedelta(days=1),
}


def _parse_relative(text: str) -> Optional[relativedelta]:
    if text in _NAMED:
        return _NAMED[text]

    ago = _AGO.search(text)
    if ago:
        text = text[:ago.start()]

    delta = relativedelta()
    position = 0
    matched_any = False

    while position < len(text):
        match = _RELATIVE_ITEM.match(text, position)
        if match is None or match.group("unit") not in _UNITS:
            return None
        if match.group("amount") is None and match.group("word") is None:
            return None

        if match.group("amount") is not None:
            amount = int(match.group("amount"))
            if match.group("sign") == "-":
                amount = -amount
        else:
            amount = _ORDINAL_WORDS[match.group("word")]

        unit = _UNITS[match.group("unit")]
        if unit == "fortnights":
            unit, amount = "weeks", amount * 2

        delta += relativedelta(**{unit: amount})
        matched_any = True
        position = match.end()
        while position < len(text) and text[position] in " ,":
            position += 1

    if not matched_any:
        return None
    return -delta if ago else delta


def parse_time(text: str, now: Optional[datetime] = None) -> datetime:
    """Parse an absolute or relative time expression.

    Args:
        text: time expression without surrounding quotes
        now: reference point for relative expressions (defaults to current time)

    Returns:
        timezone-aware datetime in UTC

    Raises:
        ValueError: if the expression is neither a relative nor an absolute time,
            or lies outside the range of datetime
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    normalized = " ".join(text.strip().lower().split())
    if not normalized:
        raise ValueError("empty time expression")

    # offsets far from now leave datetime's range
    try:
        delta = _parse_relative(normalized)
        if delta is not None:
            return (now + delta).astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"time out of range: {text!r}") from e

    try:
        parsed = date_parser.parse(text.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=tz.tzlocal())
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"not a time expression: {text!r}") from e

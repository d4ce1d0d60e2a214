"""
utils/tokens.py
----------------

Replacement of dynamic tokens in a source's ``params`` template.

Tokens take the form ``[date:<expression>]`` where the expression is a
human readable relative date such as ``today``, ``2 weeks ago`` or
``first day of last month``. Each token is replaced in place with the
ISO-8601 date-time (with offset) it denotes, so that a template like
``{"from": "[date:first day of last month]"}`` can be stored once and
resolved freshly before every request.

Besides whatever ``dateparser`` understands, the following forms are
recognised:

* ``first|last day of <month>``: keeps the time of day of the base
* ``first|last <weekday> of <month>``: midnight
* ``[last|next|this] <weekday>``: midnight, strictly before/after today
  for ``last``/``next``
* ``today``, ``yesterday``, ``tomorrow``: midnight

where ``<month>`` is ``this|last|next month``, a month name optionally
followed by ``this|last|next year`` or a four digit year, or anything
``dateparser`` resolves.

All arithmetic happens on wall-clock time in the configured timezone;
the UTC offset is attached last, so it always matches the resolved day.
Expressions that cannot be parsed resolve to the Unix epoch rather than
failing the request, and a ``date_token_unparsed`` warning is logged.
"""

from __future__ import annotations

import calendar
import json
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

import dateparser

from harvest_import.core.config import get_settings
from harvest_import.logging_config import logger

DATE_TOKEN = re.compile(r"\[date:([0-9\-\w\s]+)\]")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTHS = ("january", "february", "march", "april", "may", "june", "july",
          "august", "september", "october", "november", "december")
_WEEKDAY = "|".join(WEEKDAYS)
_MONTH = "|".join(MONTHS)

DAY_OF = re.compile(r"^(first|last) day of (.+)$")
WEEKDAY_OF = re.compile(rf"^(first|last) ({_WEEKDAY}) of (.+)$")
RELATIVE_WEEKDAY = re.compile(rf"^(?:(last|next|this) )?({_WEEKDAY})$")
RELATIVE_MONTH = re.compile(r"^(this|last|previous|next) month$")
NAMED_MONTH = re.compile(rf"^({_MONTH})(?: (?:(this|last|next) year|(\d{{4}})))?$")

MIDNIGHT_WORDS = {"today", "yesterday", "tomorrow"}
SHIFTS = {"this": 0, "last": -1, "previous": -1, "next": 1}

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse(expression: str, relative_base: datetime, tz_name: str) -> Optional[datetime]:
    """Parse with dateparser and return naive wall-clock time in ``tz_name``."""
    parsed = dateparser.parse(
        expression,
        settings={
            "RELATIVE_BASE": relative_base,
            "TIMEZONE": tz_name,
            "RETURN_AS_TIMEZONE_AWARE": True,
            "PREFER_DATES_FROM": "past",
        },
    )
    if parsed is None:
        return None
    return parsed.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _resolve_month(expression: str, base: datetime, tz_name: str) -> Optional[Tuple[int, int]]:
    relative = RELATIVE_MONTH.match(expression)
    if relative:
        return _shift_month(base.year, base.month, SHIFTS[relative.group(1)])
    named = NAMED_MONTH.match(expression)
    if named:
        year = base.year + SHIFTS.get(named.group(2) or "this", 0)
        if named.group(3):
            year = int(named.group(3))
        return year, MONTHS.index(named.group(1)) + 1
    parsed = _parse(expression, base, tz_name)
    if parsed is None:
        return None
    return parsed.year, parsed.month


def _resolve_wall_clock(expression: str, base: datetime, tz_name: str) -> Optional[datetime]:
    day_of = DAY_OF.match(expression)
    if day_of:
        month = _resolve_month(day_of.group(2), base, tz_name)
        if month is None:
            return None
        year, month_number = month
        day = 1 if day_of.group(1) == "first" else calendar.monthrange(year, month_number)[1]
        return base.replace(year=year, month=month_number, day=day)

    weekday_of = WEEKDAY_OF.match(expression)
    if weekday_of:
        month = _resolve_month(weekday_of.group(3), base, tz_name)
        if month is None:
            return None
        year, month_number = month
        weekday = WEEKDAYS.index(weekday_of.group(2))
        if weekday_of.group(1) == "first":
            day = 1 + (weekday - calendar.weekday(year, month_number, 1)) % 7
        else:
            last = calendar.monthrange(year, month_number)[1]
            day = last - (calendar.weekday(year, month_number, last) - weekday) % 7
        return datetime(year, month_number, day)

    relative_weekday = RELATIVE_WEEKDAY.match(expression)
    if relative_weekday:
        direction, weekday = relative_weekday.group(1), WEEKDAYS.index(relative_weekday.group(2))
        if direction == "last":
            days = -((base.weekday() - weekday) % 7 or 7)
        elif direction == "next":
            days = (weekday - base.weekday()) % 7 or 7
        else:
            days = (weekday - base.weekday()) % 7
        return datetime(base.year, base.month, base.day) + timedelta(days=days)

    resolved = _parse(expression, base, tz_name)
    if resolved is None:
        return None
    if expression in MIDNIGHT_WORDS:
        resolved = resolved.replace(hour=0, minute=0, second=0, microsecond=0)
    return resolved


def resolve_date_expression(expression: str, *, relative_base: Optional[datetime] = None) -> datetime:
    """Resolve a relative date expression to an aware datetime.

    :param expression: free text such as ``today`` or ``last day of next month``
    :param relative_base: moment the expression is relative to (naive,
        in the configured timezone); defaults to now
    :return: the resolved datetime, or the Unix epoch when unparseable
    """
    tz_name = get_settings().date_timezone
    tz = ZoneInfo(tz_name)
    if relative_base is None:
        relative_base = datetime.now(tz).replace(tzinfo=None)
    elif relative_base.tzinfo is not None:
        relative_base = relative_base.astimezone(tz).replace(tzinfo=None)

    normalized = " ".join(expression.lower().split())
    resolved = _resolve_wall_clock(normalized, relative_base, tz_name)
    if resolved is None:
        logger.warning(json.dumps({
            "event": "date_token_unparsed",
            "expression": expression,
            "fallback": EPOCH.isoformat(),
        }))
        return EPOCH
    return resolved.replace(tzinfo=tz)


def resolve_param_tokens(template: str, *, relative_base: Optional[datetime] = None) -> str:
    """Replace every ``[date:...]`` token in ``template``.

    Strings without tokens are returned unchanged.
    """
    if not template:
        return template

    def _replace(match: re.Match) -> str:
        resolved = resolve_date_expression(match.group(1), relative_base=relative_base)
        return resolved.isoformat(timespec="seconds")

    return DATE_TOKEN.sub(_replace, template)

"""Select and filter the commits that get replayed."""

from __future__ import annotations

import calendar
import random
import re
from collections.abc import Iterable
from datetime import date as _date
from datetime import datetime, time, timedelta, timezone

_DATE_HINT = "Use formats like '2024-01-01', '1 week ago', 'yesterday'"

_UNITS = {
    "s": "seconds", "sec": "seconds", "secs": "seconds",
    "second": "seconds", "seconds": "seconds",
    "m": "minutes", "min": "minutes", "mins": "minutes",
    "minute": "minutes", "minutes": "minutes",
    "h": "hours", "hr": "hours", "hrs": "hours",
    "hour": "hours", "hours": "hours",
    "d": "days", "day": "days", "days": "days",
    "w": "weeks", "week": "weeks", "weeks": "weeks",
    "month": "months", "months": "months",
    "y": "years", "year": "years", "years": "years",
}

_WEEKDAYS = {name: index for index, name in enumerate(
    ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
)}
_WEEKDAYS.update({name[:3]: index for name, index in list(_WEEKDAYS.items())})

_MONTHS = {
    name.lower(): index for index, name in enumerate(calendar.month_name) if name
}
_MONTHS.update({name[:3]: index for name, index in list(_MONTHS.items())})

_UNIT_RE = "|".join(sorted(_UNITS, key=len, reverse=True))
_AMOUNT_RE = r"(\d+|an|a)"
_AGO = re.compile(rf"{_AMOUNT_RE}\s*({_UNIT_RE})\s+ago")
_IN = re.compile(rf"in\s+{_AMOUNT_RE}\s*({_UNIT_RE})")
_LAST_UNIT = re.compile(rf"(last|next)\s+({_UNIT_RE})")
_ISO = re.compile(
    r"(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[ t](\d{1,2}):(\d{2})(?::(\d{2}))?)?"
)
_US = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})")
_WEEKDAY = re.compile(r"(?:(last|next)\s+)?([a-z]+)")
_MONTH_NAME_RE = "|".join(sorted(_MONTHS, key=len, reverse=True))
_DAY_MONTH = re.compile(rf"(\d{{1,2}})\s+({_MONTH_NAME_RE})\.?(?:,?\s+(\d{{4}}))?")
_MONTH_DAY = re.compile(rf"({_MONTH_NAME_RE})\.?\s+(\d{{1,2}})(?:,?\s+(\d{{4}}))?")


class HistoryError(ValueError):
    """Raised when commits cannot be selected or a filter is invalid."""


def matches_author(name: str | None, email: str | None, pattern: str) -> bool:
    """Case-insensitive partial match of ``pattern`` on author name or email."""
    needle = pattern.lower()
    return needle in (name or "").lower() or needle in (email or "").lower()


def matches_date_filter(
    date: datetime, before: datetime | None, after: datetime | None
) -> bool:
    """True if ``date`` is not later than ``before`` and not earlier than ``after``."""
    if before is not None and date > before:
        return False
    if after is not None and date < after:
        return False
    return True


def _add_months(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _shift(moment: datetime, amount: int, unit: str) -> datetime:
    if unit == "months":
        return _add_months(moment, amount)
    if unit == "years":
        return _add_months(moment, amount * 12)
    return moment + timedelta(**{unit: amount})


def _amount(text: str) -> int:
    return 1 if text in ("a", "an") else int(text)


def _midnight(day: _date, now: datetime) -> datetime:
    return datetime.combine(day, time(), tzinfo=now.tzinfo)


def _build(year: int, month: int, day: int, now: datetime) -> datetime | None:
    try:
        return _midnight(_date(year, month, day), now)
    except ValueError:
        return None


def _parse(text: str, now: datetime) -> datetime | None:
    today = now.date()
    if text == "now":
        return now
    day_words = {"today": 0, "yesterday": -1, "tomorrow": 1}
    if text in day_words:
        return _midnight(today + timedelta(days=day_words[text]), now)

    if match := _AGO.fullmatch(text):
        return _shift(now, -_amount(match[1]), _UNITS[match[2]])
    if match := _IN.fullmatch(text):
        return _shift(now, _amount(match[1]), _UNITS[match[2]])
    if match := _LAST_UNIT.fullmatch(text):
        sign = -1 if match[1] == "last" else 1
        return _shift(now, sign, _UNITS[match[2]])

    if match := _ISO.fullmatch(text):
        year, month, day, hour, minute, second = match.groups()
        try:
            return datetime(
                int(year), int(month), int(day),
                int(hour or 0), int(minute or 0), int(second or 0),
                tzinfo=now.tzinfo,
            )
        except ValueError:
            return None
    if match := _US.fullmatch(text):
        month, day, year = (int(part) for part in match.groups())
        if year < 100:
            year += 2000
        return _build(year, month, day, now)
    if match := _DAY_MONTH.fullmatch(text):
        year = int(match[3]) if match[3] else today.year
        return _build(year, _MONTHS[match[2]], int(match[1]), now)
    if match := _MONTH_DAY.fullmatch(text):
        year = int(match[3]) if match[3] else today.year
        return _build(year, _MONTHS[match[1]], int(match[2]), now)

    if (match := _WEEKDAY.fullmatch(text)) and match[2] in _WEEKDAYS:
        target = _WEEKDAYS[match[2]]
        if match[1] == "last":
            delta = (today.weekday() - target) % 7 or 7
            return _midnight(today - timedelta(days=delta), now)
        delta = (target - today.weekday()) % 7 or 7
        return _midnight(today + timedelta(days=delta), now)
    return None


def parse_date(text: str, now: datetime | None = None) -> datetime:
    """Parse an absolute or relative date into an aware UTC datetime.

    Dates without a time of day mean midnight in the time zone of ``now``,
    which defaults to the current local time.
    """
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()
    normalized = " ".join(text.strip().lower().split())
    parsed = _parse(normalized, now)
    if parsed is None:
        raise HistoryError(f"Invalid date format: '{text}'. {_DATE_HINT}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed.astimezone(timezone.utc)


def split_range(range_text: str) -> tuple[str | None, str | None]:
    """Split ``start..end`` into its revisions; an empty side becomes None."""
    if "..." in range_text:
        raise HistoryError(
            "Symmetric difference operator '...' is not supported. "
            "Use '..' instead (e.g., 'HEAD~5..HEAD')"
        )
    if ".." not in range_text:
        raise HistoryError(
            f"Invalid range format: {range_text}. "
            "Use formats like 'HEAD~5..HEAD' or 'abc123..'"
        )
    parts = range_text.split("..")
    if len(parts) != 2:
        raise HistoryError(f"Invalid range format: {range_text}")
    start, end = parts
    return start or None, end or None


class CommitPlaylist:
    """Commit ids in chronological order, oldest first, played one by one.

    Ascending and descending playback share one position, as they are never
    used together.
    """

    def __init__(self, commit_ids: Iterable[str]) -> None:
        self.commit_ids = list(commit_ids)
        self.position = 0

    def __len__(self) -> int:
        return len(self.commit_ids)

    def _check_next(self) -> None:
        if not self.commit_ids:
            raise HistoryError("No commits to play")
        if self.position >= len(self.commit_ids):
            raise HistoryError("All commits have been played")

    def next_asc(self) -> str:
        """The next commit, oldest first."""
        self._check_next()
        commit_id = self.commit_ids[self.position]
        self.position += 1
        return commit_id

    def next_desc(self) -> str:
        """The next commit, newest first."""
        self._check_next()
        commit_id = self.commit_ids[len(self.commit_ids) - 1 - self.position]
        self.position += 1
        return commit_id

    def random_choice(self, rng: random.Random | None = None) -> str:
        """A commit picked at random; the position is left unchanged."""
        if not self.commit_ids:
            raise HistoryError("No commits to play")
        chooser = rng if rng is not None else random
        return self.commit_ids[chooser.randrange(len(self.commit_ids))]

    def reset(self) -> None:
        """Start playback from the beginning again."""
        self.position = 0
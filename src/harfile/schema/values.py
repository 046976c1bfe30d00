"""Value types shared by the HAR record classes.

- Measure: a number that may be unmeasured (key absent), not applicable
  (wire value -1) or an actual value
- Timestamp: an ISO 8601 date-time that keeps its raw wire spelling
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Union

Number = Union[int, float]

# Wire value meaning "does not apply to this request"
NOT_APPLICABLE_VALUE = -1

# YYYY-MM-DDThh:mm:ss(.s+)?TZD where TZD is Z or +hh:mm / -hh:mm (colon optional)
_ISO8601_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?"
    r"(?P<tz>Z|z|[+-]\d{2}:?\d{2})$"
)


class MeasureState(Enum):
    """The three states of a HAR timing or size field."""

    UNMEASURED = "unmeasured"
    NOT_APPLICABLE = "not_applicable"
    VALUE = "value"


@dataclass(frozen=True)
class Measure:
    """A HAR number with explicit "absent" and "-1" states.

    Attributes:
        state: Which of the three states this measure is in
        value: The number when state is VALUE, otherwise None

    Example:
        >>> Measure.of(12.5).value
        12.5
        >>> Measure.not_applicable().to_wire()
        -1
        >>> Measure.unmeasured().is_measured
        False
    """

    state: MeasureState = MeasureState.UNMEASURED
    value: Number | None = None

    def __post_init__(self) -> None:
        if self.state is MeasureState.VALUE:
            if self.value is None or isinstance(self.value, bool):
                raise ValueError("Measure in VALUE state needs a number")
            if self.value < 0:
                raise ValueError(f"Measure value must be non-negative, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"Measure in {self.state.name} state cannot carry a value")

    @classmethod
    def of(cls, value: Number) -> Measure:
        """Create a measured value."""
        return cls(MeasureState.VALUE, value)

    @classmethod
    def not_applicable(cls) -> Measure:
        """Create the -1 "does not apply" marker."""
        return cls(MeasureState.NOT_APPLICABLE)

    @classmethod
    def unmeasured(cls) -> Measure:
        """Create the "not measured" (absent) marker."""
        return cls(MeasureState.UNMEASURED)

    @classmethod
    def from_wire(cls, value: Number) -> Measure:
        """Create a measure from a wire number, mapping -1 to NOT_APPLICABLE.

        Raises:
            ValueError: If value is negative but not -1
        """
        if value == NOT_APPLICABLE_VALUE:
            return cls.not_applicable()
        return cls.of(value)

    @property
    def is_measured(self) -> bool:
        """True unless the field is absent."""
        return self.state is not MeasureState.UNMEASURED

    @property
    def is_not_applicable(self) -> bool:
        return self.state is MeasureState.NOT_APPLICABLE

    @property
    def has_value(self) -> bool:
        return self.state is MeasureState.VALUE

    def to_wire(self) -> Number | None:
        """Return the wire number, or None when the key should be omitted."""
        if self.state is MeasureState.VALUE:
            return self.value
        if self.state is MeasureState.NOT_APPLICABLE:
            return NOT_APPLICABLE_VALUE
        return None

    def value_or(self, default: Number) -> Number:
        """Return the measured value, or default in the other two states."""
        return self.value if self.value is not None else default


def parse_iso8601(text: str) -> datetime | None:
    """Parse an ISO 8601 date-time that carries a timezone offset.

    Fractions beyond microseconds are truncated.

    Args:
        text: Date-time string, e.g. 2009-07-24T19:20:30.45+01:00

    Returns:
        Timezone-aware datetime, or None if text is not a valid date-time
        with an offset

    Example:
        >>> parse_iso8601("2020-01-01T00:00:00.000Z").tzinfo
        datetime.timezone.utc
        >>> parse_iso8601("2020-01-01 00:00:00") is None
        True
    """
    match = _ISO8601_RE.match(text)
    if not match:
        return None

    tz_text = match.group("tz")
    if tz_text in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        sign = -1 if tz_text[0] == "-" else 1
        digits = tz_text[1:].replace(":", "")
        hours, minutes = int(digits[:2]), int(digits[2:])
        if hours > 23 or minutes > 59:
            return None
        tzinfo = timezone(sign * timedelta(hours=hours, minutes=minutes))

    fraction = match.group("fraction") or "0"
    microsecond = int(fraction[:6].ljust(6, "0"))

    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second") or 0),
            microsecond,
            tzinfo=tzinfo,
        )
    except ValueError:
        # Out-of-range component, e.g. month 13
        return None


def format_iso8601(moment: datetime) -> str:
    """Format an aware datetime the way HAR examples do (milliseconds, offset).

    Raises:
        ValueError: If moment is naive
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("HAR timestamps need a timezone offset")
    text = moment.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


@dataclass(frozen=True)
class Timestamp:
    """A HAR date-time keeping both the raw wire string and the parsed value.

    The raw string is what gets encoded, so precision and offset spelling
    survive a decode/encode round trip. ``moment`` is always parsed from
    ``raw`` and takes no part in equality; it is None when raw is not a
    valid ISO 8601 date-time with an offset.

    Attributes:
        raw: The string as it appears on the wire
        moment: Parsed timezone-aware datetime, or None if raw is invalid
    """

    raw: str
    moment: datetime | None = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "moment", parse_iso8601(self.raw))

    @classmethod
    def parse(cls, raw: str) -> Timestamp:
        """Create a timestamp from a wire string (never raises)."""
        return cls(raw)

    @classmethod
    def from_datetime(cls, moment: datetime) -> Timestamp:
        """Create a timestamp from an aware datetime."""
        return cls(format_iso8601(moment))

    @property
    def is_valid(self) -> bool:
        return self.moment is not None

    def __str__(self) -> str:
        return self.raw

"""Tests for Measure and Timestamp value types."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from harfile.schema import Measure, MeasureState, Timestamp, format_iso8601, parse_iso8601

# =============================================================================
# Test Data Tables
# =============================================================================

# ┌────────────────────────────────────┬──────────┬─────────────────────────┐
# │ raw                                │ valid    │ description             │
# ├────────────────────────────────────┼──────────┼─────────────────────────┤
# │ Wire string                        │ parsed?  │ test case name          │
# └────────────────────────────────────┴──────────┴─────────────────────────┘
#
# fmt: off
TIMESTAMP_CASES = [
    ("2009-07-24T19:20:30.45+01:00",       True,    "har_doc_example"),
    ("2020-01-01T00:00:00.000Z",           True,    "utc_z"),
    ("2020-01-01T00:00:00Z",               True,    "no_fraction"),
    ("2020-01-01T00:00Z",                  True,    "no_seconds"),
    ("2020-01-01T00:00:00.123456789-05:30", True,   "nanoseconds"),
    ("2020-01-01T00:00:00+0100",           True,    "offset_without_colon"),
    ("2020-01-01T00:00:00.000",            False,   "missing_offset"),
    ("2020-01-01 00:00:00Z",               False,   "space_separator"),
    ("2020-13-01T00:00:00Z",               False,   "month_out_of_range"),
    ("2020-02-30T00:00:00Z",               False,   "day_out_of_range"),
    ("2020-01-01T00:00:00+25:00",          False,   "offset_out_of_range"),
    ("yesterday",                          False,   "not_a_date"),
    ("",                                   False,   "empty"),
]
# fmt: on


# =============================================================================
# Test Classes
# =============================================================================


class TestMeasure:
    """Tests for the three-state Measure."""

    def test_default_is_unmeasured(self) -> None:
        """Test a bare Measure is unmeasured."""
        measure = Measure()

        assert measure.state is MeasureState.UNMEASURED
        assert not measure.is_measured
        assert measure.to_wire() is None

    def test_not_applicable_writes_minus_one(self) -> None:
        """Test the not-applicable marker is -1 on the wire."""
        measure = Measure.not_applicable()

        assert measure.is_measured
        assert measure.is_not_applicable
        assert not measure.has_value
        assert measure.to_wire() == -1

    def test_zero_is_a_value(self) -> None:
        """Test zero is distinct from both absent and not applicable."""
        zero = Measure.of(0)

        assert zero.has_value
        assert zero.to_wire() == 0
        assert zero != Measure.unmeasured()
        assert zero != Measure.not_applicable()

    def test_from_wire_maps_minus_one(self) -> None:
        """Test from_wire turns -1 into the not-applicable marker."""
        assert Measure.from_wire(-1) == Measure.not_applicable()
        assert Measure.from_wire(12.5) == Measure.of(12.5)

    def test_from_wire_rejects_other_negatives(self) -> None:
        """Test negative numbers other than -1 are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            Measure.from_wire(-2)

    def test_value_state_requires_number(self) -> None:
        """Test a VALUE measure needs a real number."""
        with pytest.raises(ValueError):
            Measure(MeasureState.VALUE)
        with pytest.raises(ValueError):
            Measure(MeasureState.VALUE, True)

    def test_marker_states_reject_values(self) -> None:
        """Test absent and not-applicable measures can't carry a number."""
        with pytest.raises(ValueError, match="cannot carry a value"):
            Measure(MeasureState.NOT_APPLICABLE, 5)

    def test_value_or(self) -> None:
        """Test value_or falls back for both marker states."""
        assert Measure.of(3).value_or(0) == 3
        assert Measure.not_applicable().value_or(0) == 0
        assert Measure.unmeasured().value_or(7) == 7

    def test_int_and_float_preserved(self) -> None:
        """Test the numeric type is kept as given."""
        assert isinstance(Measure.of(10).value, int)
        assert isinstance(Measure.of(10.0).value, float)


class TestParseIso8601:
    """Tests for ISO 8601 parsing."""

    @pytest.mark.parametrize(
        ("raw", "valid", "desc"),
        TIMESTAMP_CASES,
        ids=[c[2] for c in TIMESTAMP_CASES],
    )
    def test_validity(self, raw: str, valid: bool, desc: str) -> None:
        """Test which strings parse."""
        assert (parse_iso8601(raw) is not None) is valid

    def test_offset_applied(self) -> None:
        """Test the timezone offset is kept on the datetime."""
        moment = parse_iso8601("2009-07-24T19:20:30.45+01:00")

        assert moment is not None
        assert moment.utcoffset() == timedelta(hours=1)
        assert moment.microsecond == 450000

    def test_negative_offset(self) -> None:
        """Test negative offsets."""
        moment = parse_iso8601("2020-01-01T00:00:00-05:30")

        assert moment is not None
        assert moment.utcoffset() == -timedelta(hours=5, minutes=30)

    def test_fraction_truncated_to_microseconds(self) -> None:
        """Test sub-microsecond digits are dropped."""
        moment = parse_iso8601("2020-01-01T00:00:00.123456789Z")

        assert moment is not None
        assert moment.microsecond == 123456


class TestFormatIso8601:
    """Tests for ISO 8601 formatting."""

    def test_utc_uses_z(self) -> None:
        """Test UTC is written with a Z suffix and milliseconds."""
        moment = datetime(2020, 1, 1, 12, 30, 0, 250000, tzinfo=timezone.utc)

        assert format_iso8601(moment) == "2020-01-01T12:30:00.250Z"

    def test_offset_kept(self) -> None:
        """Test non-UTC offsets are written as +hh:mm."""
        moment = datetime(2020, 1, 1, tzinfo=timezone(timedelta(hours=2)))

        assert format_iso8601(moment) == "2020-01-01T00:00:00.000+02:00"

    def test_naive_rejected(self) -> None:
        """Test naive datetimes are refused."""
        with pytest.raises(ValueError, match="timezone"):
            format_iso8601(datetime(2020, 1, 1))


class TestTimestamp:
    """Tests for Timestamp."""

    def test_parse_keeps_raw(self) -> None:
        """Test the raw spelling is preserved."""
        timestamp = Timestamp.parse("2020-01-01T00:00:00.1+00:00")

        assert timestamp.raw == "2020-01-01T00:00:00.1+00:00"
        assert timestamp.is_valid
        assert str(timestamp) == timestamp.raw

    def test_invalid_keeps_raw(self) -> None:
        """Test an invalid string is kept with no parsed moment."""
        timestamp = Timestamp.parse("not a date")

        assert not timestamp.is_valid
        assert timestamp.moment is None
        assert timestamp.raw == "not a date"

    def test_from_datetime(self) -> None:
        """Test building a timestamp from an aware datetime."""
        moment = datetime(2021, 6, 1, 8, 0, 0, 123000, tzinfo=timezone.utc)
        timestamp = Timestamp.from_datetime(moment)

        assert timestamp.raw == "2021-06-01T08:00:00.123Z"
        assert timestamp.moment == moment

    def test_constructor_parses_raw(self) -> None:
        """Test the plain constructor fills in the parsed moment."""
        timestamp = Timestamp("2020-01-01T00:00:00.000Z")

        assert timestamp.moment == datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert timestamp == Timestamp.parse("2020-01-01T00:00:00.000Z")
        assert hash(timestamp) == hash(Timestamp.parse("2020-01-01T00:00:00.000Z"))

    def test_constructor_invalid_raw(self) -> None:
        """Test the plain constructor leaves moment unset for an invalid string."""
        assert Timestamp("yesterday").moment is None

    def test_equality_uses_raw(self) -> None:
        """Test equal instants with different spellings are different timestamps."""
        assert Timestamp.parse("2020-01-01T00:00:00Z") != Timestamp.parse("2020-01-01T00:00:00+00:00")

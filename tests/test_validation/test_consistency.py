"""Table-driven tests for the validation/consistency module."""

from __future__ import annotations

import json

import pytest

from harfile.codec import HarSizeError, MalformedInputError, decode
from harfile.schema import Entry, Log, Measure, Page, Timings
from harfile.validation import (
    Finding,
    check_entry_time,
    check_page_refs,
    validate_archive,
    validate_har,
)

# ┌──────────────────────────────────────────────────────────────────┬──────────┬─────────────────────────┐
# │ Entry.time and Timings keyword arguments                         │ flagged  │ description             │
# ├──────────────────────────────────────────────────────────────────┼──────────┼─────────────────────────┤
# │ time matches send + wait + receive                               │ False    │ exact match             │
# │ time off by less than the 1 ms tolerance                         │ False    │ rounding                │
# │ time off by more than the tolerance                              │ True     │ mismatch                │
# │ -1 phases are not part of the sum                                │ False    │ not applicable phases   │
# │ ssl is part of connect and not added again                       │ False    │ ssl inside connect      │
# └──────────────────────────────────────────────────────────────────┴──────────┴─────────────────────────┘
#
# fmt: off
TIME_CASES = [
    (10,    {"send": 1, "wait": 8, "receive": 1},                                        False, "exact match"),
    (10.6,  {"send": 1, "wait": 8, "receive": 1},                                        False, "rounding"),
    (25,    {"send": 1, "wait": 8, "receive": 1},                                        True,  "mismatch"),
    (10,    {"blocked": Measure.not_applicable(), "dns": Measure.not_applicable(),
             "send": 1, "wait": 8, "receive": 1},                                        False, "not applicable phases"),
    (50,    {"connect": Measure.of(40), "ssl": Measure.of(30),
             "send": 1, "wait": 8, "receive": 1},                                        False, "ssl inside connect"),
]
# fmt: on


class TestCheckEntryTime:
    """Tests for check_entry_time."""

    @pytest.mark.parametrize(
        ("time", "timings", "flagged", "desc"),
        TIME_CASES,
        ids=[c[3] for c in TIME_CASES],
    )
    def test_time_against_timings(self, time: float, timings: dict, flagged: bool, desc: str) -> None:
        """Test Entry.time is compared with the timings sum."""
        findings: list[Finding] = []

        check_entry_time(Entry(time=time, timings=Timings(**timings)), "log.entries[0]", findings)

        assert any(f.field == "time" for f in findings) is flagged

    def test_custom_tolerance(self) -> None:
        """Test a wider tolerance accepts larger differences."""
        findings: list[Finding] = []
        entry = Entry(time=15, timings=Timings(send=1, wait=8, receive=1))

        check_entry_time(entry, "log.entries[0]", findings, tolerance=5)

        assert findings == []

    def test_ssl_exceeds_connect(self) -> None:
        """Test ssl time larger than connect time is flagged."""
        findings: list[Finding] = []
        timings = Timings(connect=Measure.of(10), ssl=Measure.of(20), send=1, wait=8, receive=1)

        check_entry_time(Entry(time=20, timings=timings), "log.entries[2]", findings)

        assert len(findings) == 1
        assert findings[0].location == "log.entries[2].timings"
        assert findings[0].field == "ssl"

    def test_ssl_with_connect_not_applicable(self) -> None:
        """Test ssl isn't compared against a -1 connect."""
        findings: list[Finding] = []
        timings = Timings(connect=Measure.not_applicable(), ssl=Measure.of(20), send=1, wait=8, receive=1)

        check_entry_time(Entry(time=10, timings=timings), "log.entries[0]", findings)

        assert findings == []

    def test_missing_timings_skipped(self) -> None:
        """Test entries without timings produce no finding."""
        findings: list[Finding] = []

        check_entry_time(Entry(time=10), "log.entries[0]", findings)

        assert findings == []


class TestCheckPageRefs:
    """Tests for check_page_refs."""

    def test_valid_refs(self) -> None:
        """Test entries pointing at existing pages are fine."""
        findings: list[Finding] = []
        log = Log(pages=[Page(id="page_1")], entries=[Entry(pageref="page_1"), Entry()])

        check_page_refs(log, findings)

        assert findings == []

    def test_dangling_ref(self) -> None:
        """Test a pageref without a page is flagged."""
        findings: list[Finding] = []
        log = Log(pages=[Page(id="page_1")], entries=[Entry(pageref="page_1"), Entry(pageref="page_9")])

        check_page_refs(log, findings)

        assert len(findings) == 1
        assert findings[0].location == "log.entries[1]"
        assert findings[0].value == "page_9"

    def test_duplicate_page_id(self) -> None:
        """Test a repeated page id is flagged once per duplicate."""
        findings: list[Finding] = []
        log = Log(pages=[Page(id="page_1"), Page(id="page_1")])

        check_page_refs(log, findings)

        assert [(f.location, f.reason) for f in findings] == [("log.pages[1]", "Duplicate page id")]


class TestValidateArchive:
    """Tests for validate_archive and validate_har."""

    def test_clean_archive(self, scenario_har: bytes) -> None:
        """Test a consistent archive has no findings."""
        assert validate_archive(decode(scenario_har)) == []

    def test_invalid_timestamp_reported(self, sample_har, sample_har_entry) -> None:
        """Test timestamps kept as raw strings become warnings."""
        har = sample_har([sample_har_entry(), sample_har_entry(started="last tuesday")])

        findings = validate_archive(decode(json.dumps(har)))

        assert len(findings) == 1
        assert findings[0].severity == "warning"
        assert findings[0].location == "log.entries[1]"
        assert findings[0].field == "startedDateTime"
        assert findings[0].value == "last tuesday"

    def test_all_findings_collected(self, sample_har, sample_har_entry) -> None:
        """Test findings from every check are returned together."""
        har = sample_har([sample_har_entry(time=99, pageref="nope")])

        findings = validate_archive(decode(json.dumps(har)))

        assert {f.field for f in findings} == {"time", "pageref"}

    def test_validate_har_file(self, temp_har_file) -> None:
        """Test validating a file on disk."""
        assert validate_har(temp_har_file()) == []

    def test_validate_har_size_limit(self, temp_har_file) -> None:
        """Test the size limit is passed through."""
        with pytest.raises(HarSizeError):
            validate_har(temp_har_file(), max_size=10)

    def test_validate_har_malformed(self, tmp_path) -> None:
        """Test structural errors propagate."""
        path = tmp_path / "broken.har"
        path.write_text('{"log": []}')

        with pytest.raises(MalformedInputError):
            validate_har(path)

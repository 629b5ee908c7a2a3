"""Unit tests for CSV export of recorded sessions."""

import pytest

from emgstream.exceptions import EmptyExportError
from emgstream.models.samples import Sample
from emgstream.models.session import CaptureRecord
from emgstream.recording.csv_export import (
    ExportPrecision,
    header_only,
    parse_export,
    serialize_records,
)


def record(elapsed, raw, rms, sequence=0):
    return CaptureRecord(
        elapsed=elapsed,
        sample=Sample(value=raw, sequence=sequence, timestamp=elapsed),
        rms=rms
    )


@pytest.mark.unit
class TestSerializeRecords:

    def test_header_and_rows(self):
        payload = serialize_records([record(0.0, 0.1, 0.1), record(0.005, 0.2, 0.15, 1)])

        assert payload.splitlines() == [
            "timestamp,raw,rms",
            "0.000,0.1000,0.10",
            "0.005,0.2000,0.15",
        ]
        assert payload.endswith("\n")

    def test_custom_precision(self):
        precision = ExportPrecision(timestamp=1, raw=2, rms=3)

        payload = serialize_records([record(1.25, -0.123456, 0.5)], precision)

        assert payload.splitlines()[1] == "1.2,-0.12,0.500"

    def test_empty_records_give_header_only(self):
        assert serialize_records([]) == "timestamp,raw,rms\n"
        assert serialize_records(()) == header_only()

    def test_strict_empty_raises(self):
        with pytest.raises(EmptyExportError):
            serialize_records([], strict=True)


@pytest.mark.unit
class TestParseExport:

    def test_round_trip(self):
        records = [record(0.0, 0.1, 0.10), record(0.004, 0.2, 0.15, 1)]

        rows = parse_export(serialize_records(records))

        assert len(rows) == 2
        assert rows[0].timestamp == pytest.approx(0.0)
        assert rows[0].raw == pytest.approx(0.1)
        assert rows[0].rms == pytest.approx(0.10)
        assert rows[1].timestamp == pytest.approx(0.004)
        assert rows[1].raw == pytest.approx(0.2)
        assert rows[1].rms == pytest.approx(0.15)

    def test_values_within_declared_precision(self):
        rows = parse_export(serialize_records([record(0.0012345, 0.123456789, 0.987654)]))

        assert rows[0].timestamp == pytest.approx(0.0012345, abs=5e-4)
        assert rows[0].raw == pytest.approx(0.123456789, abs=5e-5)
        assert rows[0].rms == pytest.approx(0.987654, abs=5e-3)

    def test_header_only(self):
        assert parse_export(header_only()) == []

    def test_bad_header(self):
        with pytest.raises(ValueError):
            parse_export("time,value\n1,2\n")

    def test_empty_text(self):
        with pytest.raises(ValueError):
            parse_export("")

    def test_malformed_row(self):
        with pytest.raises(ValueError):
            parse_export("timestamp,raw,rms\n0.1,0.2\n")

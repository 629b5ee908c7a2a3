"""CSV serialization of recorded sessions."""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..exceptions import EmptyExportError
from ..models.session import CaptureRecord, ExportRow

logger = logging.getLogger(__name__)

EXPORT_HEADER = ("timestamp", "raw", "rms")
EXPORT_EXTENSION = ".csv"


@dataclass(frozen=True)
class ExportPrecision:
    """Number of decimals written for each column."""
    timestamp: int = 3
    raw: int = 4
    rms: int = 2


def _format_rows(records: Iterable[CaptureRecord], precision: ExportPrecision):
    for record in records:
        yield (
            f"{record.elapsed:.{precision.timestamp}f}",
            f"{record.sample.value:.{precision.raw}f}",
            f"{record.rms:.{precision.rms}f}",
        )


def serialize_records(records: Sequence[CaptureRecord],
                      precision: ExportPrecision = ExportPrecision(),
                      strict: bool = False) -> str:
    """Serialize captured records to CSV text.

    Args:
        records: Records in capture order
        precision: Decimal places per column
        strict: Raise instead of returning a header-only payload

    Returns:
        CSV text with a ``timestamp,raw,rms`` header and one row per record

    Raises:
        EmptyExportError: If strict and there are no records
    """
    if strict and not records:
        raise EmptyExportError("No records captured in this session")

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    writer.writerows(_format_rows(records, precision))

    logger.debug(f"Serialized {len(records)} records")
    return output.getvalue()


def header_only() -> str:
    """Payload for a session without records."""
    return ",".join(EXPORT_HEADER) + "\n"


def parse_export(text: str) -> List[ExportRow]:
    """Parse an export payload back into rows.

    Raises:
        ValueError: If the header is missing or a row is malformed
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None or tuple(header) != EXPORT_HEADER:
        raise ValueError(f"Unexpected export header: {header}")

    rows = []
    for line_number, fields in enumerate(reader, start=2):
        if not fields:
            continue
        if len(fields) != len(EXPORT_HEADER):
            raise ValueError(f"Line {line_number}: expected {len(EXPORT_HEADER)} fields, got {len(fields)}")
        timestamp, raw, rms = (float(field) for field in fields)
        rows.append(ExportRow(timestamp=timestamp, raw=raw, rms=rms))
    return rows

"""Scan record assembly and JSON / CSV export."""

import csv
import io
import uuid
from datetime import datetime, timezone
from typing import Iterable

from app.models.scan import ScanRecord, ScanResult

CSV_COLUMNS = [
    "url",
    "timestamp",
    "overall",
    "meta_tags",
    "content",
    "technical",
    "performance",
    "social",
    "errors",
    "warnings",
]


def record_scan(url: str, result: ScanResult) -> ScanRecord:
    """Wrap *result* in a new :class:`ScanRecord` with a fresh id and the current UTC time."""
    return ScanRecord(
        id=uuid.uuid4().hex,
        url=url,
        created_at=datetime.now(timezone.utc),
        result=result,
    )


def to_json(record: ScanRecord) -> str:
    """Pretty-printed JSON of the full record: signals, score and issues."""
    return record.model_dump_json(indent=2, by_alias=True)


def to_csv(records: Iterable[ScanRecord]) -> str:
    """One summary row per record. Fields are quoted per standard CSV rules."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in records:
        score = record.result.score
        issues = record.result.issues
        writer.writerow(
            [
                record.url,
                record.created_at.isoformat(),
                score.overall,
                score.meta_tags,
                score.content,
                score.technical,
                score.performance,
                score.social,
                len(issues.errors),
                len(issues.warnings),
            ]
        )
    return buffer.getvalue()

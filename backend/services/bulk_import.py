"""
Bulk content import.

Formats:

* CSV question banks. Rows are validated one by one; bad rows are reported
  and skipped, good rows are written in fixed-size batches. A batch that the
  store rejects is reported and the remaining batches still run.
* Headerless coding-question CSV for one coding category. The first
  malformed line aborts; otherwise every row goes in one insert.
* JSON arrays of interview questions. Every record is validated first and
  the array is written in one insert.
* JSON arrays of coding questions or system design problems. The array is
  handed to the store unvalidated in a single insert, so it lands whole or
  not at all.

Parsing is pure; only ``import_*`` coroutines touch the store.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from core.domain.content import (
    CODING_CSV_COLUMNS,
    CODING_CSV_MIN_COLUMNS,
    DEFAULT_CODING_DIFFICULTY,
    QUESTION_LEVELS,
    QUESTION_OPTIONAL_FIELDS,
    QUESTION_REQUIRED_FIELDS,
    Collection,
    slugify,
)
from core.domain.subscription import TIER_ALIASES, Tier
from core.exceptions import ImportSchemaError, ImportValidationError, StoreError
from core.interfaces.repositories import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

ShouldContinue = Callable[[], Awaitable[bool]]


@dataclass
class ImportResult:
    """Outcome of one import request."""

    success_count: int = 0
    errors: list[str] = field(default_factory=list)
    total_rows: int = 0

    @property
    def completed(self) -> bool:
        return self.success_count > 0


@dataclass
class ParsedCsv:
    """Valid records plus per-row errors, before anything is written."""

    records: list[dict]
    errors: list[str]
    total_rows: int


def _clean(cell: str) -> str:
    """Trim and drop one layer of wrapping double quotes."""
    value = cell.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_csv_questions(text: str) -> ParsedCsv:
    """Parse a question-bank CSV.

    Raises ImportSchemaError if the header lacks a required column. Rows are
    numbered from 1, counting only non-blank lines after the header.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise ImportSchemaError("No data to import")

    header = [_clean(name).lower() for name in lines[0].split(",")]
    missing = [name for name in QUESTION_REQUIRED_FIELDS if name not in header]
    if missing:
        raise ImportSchemaError(f"Missing required columns: {', '.join(missing)}")

    wanted = set(QUESTION_REQUIRED_FIELDS) | set(QUESTION_OPTIONAL_FIELDS)
    records: list[dict] = []
    errors: list[str] = []

    for row_number, line in enumerate(lines[1:], start=1):
        cells = [_clean(cell) for cell in line.split(",")]
        row = {
            name: (cells[i] if i < len(cells) else "")
            for i, name in enumerate(header)
            if name in wanted
        }

        if any(not row.get(name) for name in QUESTION_REQUIRED_FIELDS):
            errors.append(f"Row {row_number}: Missing required fields")
            continue

        raw_tier = row.get("tier") or ""
        if raw_tier:
            tier = Tier.parse(raw_tier)
            if tier is None:
                errors.append(f"Row {row_number}: Unknown tier '{raw_tier}'")
                continue
        else:
            tier = Tier.lowest()

        record = {name: row[name] for name in QUESTION_REQUIRED_FIELDS}
        record["tier"] = tier.value
        records.append(record)

    return ParsedCsv(records=records, errors=errors, total_rows=len(lines) - 1)


async def import_csv_questions(
    store: ContentStore,
    text: str,
    subcategory_id: str,
    created_by: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    should_continue: Optional[ShouldContinue] = None,
) -> ImportResult:
    """Validate and write a CSV question bank into a subcategory.

    Raises ImportSchemaError or ImportValidationError when nothing can be
    written; in that case the store is never called.
    """
    parsed = parse_csv_questions(text)
    if not parsed.records:
        raise ImportValidationError("No valid rows to import")

    result = ImportResult(errors=list(parsed.errors), total_rows=parsed.total_rows)
    records = [
        {**record, "subcategory_id": subcategory_id, "created_by": created_by}
        for record in parsed.records
    ]
    batches = [records[i : i + batch_size] for i in range(0, len(records), batch_size)]

    for batch_number, batch in enumerate(batches, start=1):
        if should_continue is not None and not await should_continue():
            for skipped in range(batch_number, len(batches) + 1):
                result.errors.append(f"Batch {skipped}: Import cancelled")
            logger.info(
                "CSV import into subcategory %s cancelled before batch %d of %d",
                subcategory_id,
                batch_number,
                len(batches),
            )
            break

        try:
            result.success_count += await store.insert_many(Collection.QUESTIONS, batch)
        except StoreError as e:
            result.errors.append(f"Batch {batch_number}: {e.message}")
            logger.warning("CSV import batch %d failed: %s", batch_number, e.message)

    logger.info(
        "CSV import into subcategory %s: %d imported, %d errors",
        subcategory_id,
        result.success_count,
        len(result.errors),
        extra={"success_count": result.success_count, "error_count": len(result.errors)},
    )
    return result


def parse_json_array(text: str) -> list[Any]:
    """Decode ``text`` and require a top-level array."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportSchemaError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")
    if not isinstance(data, list):
        raise ImportSchemaError("JSON must be an array of records")
    return data


def _canonical_tier(record: Any) -> Any:
    tier = record.get("tier") if isinstance(record, dict) else None
    if isinstance(tier, str) and tier in TIER_ALIASES:
        return {**record, "tier": TIER_ALIASES[tier].value}
    return record


async def import_json_records(
    store: ContentStore,
    collection: Collection,
    text: str,
) -> ImportResult:
    """Insert a JSON array of records in one store call.

    Records are not validated here; whatever the store rejects fails the
    whole import and StoreError propagates to the caller.
    """
    records = parse_json_array(text)
    if not records:
        raise ImportValidationError("No records to import")

    inserted = await store.insert_many(collection, [_canonical_tier(r) for r in records])
    logger.info(
        "JSON import into %s: %d records",
        collection.value,
        inserted,
        extra={"collection": collection.value, "success_count": inserted},
    )
    return ImportResult(success_count=inserted, total_rows=len(records))


def parse_coding_csv(text: str, category: str, default_tier: Tier) -> list[dict]:
    """Parse a headerless coding-question CSV.

    Column order is ``CODING_CSV_COLUMNS``; tags are separated by ``;``. Lines
    are numbered from 1 over the trimmed payload, blank lines included, and
    the first malformed line aborts the whole parse.
    """
    body = text.strip()
    if not body:
        raise ImportSchemaError("No data to import")

    expected = ", ".join(CODING_CSV_COLUMNS)
    records: list[dict] = []

    for line_number, line in enumerate(body.splitlines(), start=1):
        if not line.strip():
            continue

        cells = [_clean(cell) for cell in line.split(",")]
        if len(cells) < CODING_CSV_MIN_COLUMNS:
            raise ImportSchemaError(
                f"Invalid format at line {line_number}. Expected: {expected}"
            )
        cells += [""] * (len(CODING_CSV_COLUMNS) - len(cells))

        title = cells[0]
        if not title:
            raise ImportValidationError(f"Missing title at line {line_number}")

        raw_tier = cells[7]
        tier = Tier.parse(raw_tier) if raw_tier else default_tier
        if tier is None:
            raise ImportValidationError(f"Unknown tier '{raw_tier}' at line {line_number}")

        records.append(
            {
                "title": title,
                "slug": slugify(title),
                "description": cells[1],
                "solution": cells[2],
                "difficulty": cells[3] or DEFAULT_CODING_DIFFICULTY,
                "category": category,
                "tags": [tag.strip() for tag in cells[4].split(";") if tag.strip()],
                "github_link": cells[5],
                "video_link": cells[6],
                "tier": tier.value,
            }
        )

    return records


async def import_coding_csv(
    store: ContentStore,
    text: str,
    category: str,
    default_tier: Tier = Tier.EXPLORER,
    created_by: Optional[str] = None,
) -> ImportResult:
    """Write a coding-question CSV into ``category`` in one store call.

    The store sees all rows or none; StoreError propagates to the caller.
    """
    records = parse_coding_csv(text, category, default_tier)
    inserted = await store.insert_many(
        Collection.CODING_QUESTIONS,
        [{**record, "created_by": created_by} for record in records],
    )
    logger.info(
        "Coding CSV import into category %r: %d questions",
        category,
        inserted,
        extra={"collection": Collection.CODING_QUESTIONS.value, "success_count": inserted},
    )
    return ImportResult(success_count=inserted, total_rows=len(records))


def validate_json_questions(records: list[Any]) -> list[dict]:
    """Check every record before anything is written.

    Each record needs the required question fields and a known level. An
    optional tier is normalised; an unknown one is rejected.
    """
    validated: list[dict] = []
    for record in records:
        if not isinstance(record, dict) or any(
            not record.get(name) for name in QUESTION_REQUIRED_FIELDS
        ):
            raise ImportValidationError(
                "Each question must have title, content, answer, type, and level"
            )
        if record["level"] not in QUESTION_LEVELS:
            raise ImportValidationError("Level must be 'Basic', 'Intermediate', or 'Advanced'")

        raw_tier = record.get("tier")
        if raw_tier:
            tier = Tier.parse(raw_tier) if isinstance(raw_tier, str) else None
            if tier is None:
                raise ImportValidationError(f"Unknown tier '{raw_tier}'")
        else:
            tier = Tier.lowest()

        question = {name: record[name] for name in QUESTION_REQUIRED_FIELDS}
        question["tier"] = tier.value
        validated.append(question)
    return validated


async def import_json_questions(
    store: ContentStore,
    text: str,
    subcategory_id: str,
    created_by: Optional[str] = None,
) -> ImportResult:
    """Validate a JSON array of questions and insert it into a subcategory.

    Unlike CSV question banks, one bad record rejects the whole payload.
    """
    records = parse_json_array(text)
    if not records:
        raise ImportValidationError("No records to import")

    questions = [
        {**question, "subcategory_id": subcategory_id, "created_by": created_by}
        for question in validate_json_questions(records)
    ]
    inserted = await store.insert_many(Collection.QUESTIONS, questions)
    logger.info(
        "JSON question import into subcategory %s: %d questions",
        subcategory_id,
        inserted,
        extra={"collection": Collection.QUESTIONS.value, "success_count": inserted},
    )
    return ImportResult(success_count=inserted, total_rows=len(records))

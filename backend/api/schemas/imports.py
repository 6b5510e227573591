"""
Bulk import request and response schemas.
"""

from pydantic import BaseModel, Field

from .access import TierName


class CsvImportRequest(BaseModel):
    """Question bank as CSV text: ``title,content,answer,type,level[,tier]``."""

    csv: str = Field(..., min_length=1)


class CodingCsvImportRequest(BaseModel):
    """Headerless coding-question CSV; rows without a tier get ``default_tier``."""

    csv: str = Field(..., min_length=1)
    default_tier: TierName = None


class JsonImportRequest(BaseModel):
    """Records as a JSON array encoded in a string, exactly as pasted."""

    json_text: str = Field(..., min_length=1, alias="json")

    model_config = {"populate_by_name": True}


class ImportResponse(BaseModel):
    """Outcome of an import; ``errors`` may be non-empty even when completed."""

    completed: bool
    success_count: int
    total_rows: int
    errors: list[str] = Field(default_factory=list)
    message: str

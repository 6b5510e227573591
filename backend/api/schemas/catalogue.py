"""
Category and subcategory schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .access import StoredTier, TierName


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    tier: TierName = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    tier: TierName = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    tier: StoredTier = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubcategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    tier: TierName = None


class SubcategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    tier: TierName = None


class SubcategoryResponse(BaseModel):
    id: str
    category_id: Optional[str] = None
    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    tier: StoredTier = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CodingCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CodingCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class CodingCategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CascadeDeleteResponse(BaseModel):
    """Counts of rows removed by a cascading delete."""

    message: str
    deleted: dict[str, int]

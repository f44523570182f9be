"""Pydantic schemas for Categories."""
from typing import Optional
from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-z0-9-]+$")
    name_fr: str = Field(..., min_length=1, max_length=100)
    name_en: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    name_fr: Optional[str] = Field(None, min_length=1, max_length=100)
    name_en: Optional[str] = Field(None, min_length=1, max_length=100)


class CategoryOut(BaseModel):
    slug: str
    name_fr: str
    name_en: str

    model_config = {"from_attributes": True}

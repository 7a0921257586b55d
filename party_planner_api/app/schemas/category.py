"""Pydantic models for event categories."""

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, example="Music")


class CategoryRead(CategoryCreate):
    id: str

"""
Pydantic models for the Mandarin vocabulary deck.

These models define the structure of MongoDB word documents. The deck is
read-only to the scheduler: it only needs the ordered word ids.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(BaseModel):
    """A user-defined grouping of words (e.g. "Food", "Travel")."""
    id: str
    name: str


class Lesson(BaseModel):
    """A textbook lesson the word belongs to."""
    id: str
    name: str


class Word(BaseModel):
    """
    A single flashcard.

    One document per word; `id` is the card id used by the scheduler.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="word_id", description="Stable card identifier")
    hanzi: str = Field(..., min_length=1, description="Chinese characters")
    pinyin: str = Field(default="", description="Romanization with tone marks")
    english: str = Field(default="", description="English translation")
    description: Optional[str] = Field(default=None, description="Usage notes shown on the back")

    category: Optional[Category] = None
    lesson: Optional[Lesson] = None

    @field_validator("hanzi", "pinyin", "english")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

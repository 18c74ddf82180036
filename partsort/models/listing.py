"""Pydantic models for scraped vendor listings.

A Listing is the immutable input of every engine operation.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Closed set of drone-part categories.

    UNKNOWN is an expected outcome, not an error.
    """
    MOTOR = "motor"
    FRAME = "frame"
    STACK = "stack"
    CAMERA = "camera"
    PROP = "prop"
    BATTERY = "battery"
    UNKNOWN = "unknown"

    @classmethod
    def known(cls) -> list["Category"]:
        """All categories except UNKNOWN, in declaration order."""
        return [c for c in cls if c is not cls.UNKNOWN]

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Lenient lookup for loosely typed category strings.

        Unrecognised values (including the legacy "other") map to UNKNOWN.
        """
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Listing(BaseModel):
    """A single scraped vendor product entry.

    Attributes:
        name: Listing title as scraped
        description: Free-text description (may be empty)
        vendor: Optional vendor identifier
        existing_category: Category currently stored for this listing
        brand: Brand as reported by the vendor, if any
        specifications: Structured specs carried alongside the listing
    """

    name: str = ""
    description: str = ""
    vendor: Optional[str] = None
    existing_category: Optional[Category] = None
    brand: Optional[str] = None
    specifications: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Tattu 1550mAh 4S 75C LiPo Battery",
                "description": "XT60 connector",
                "vendor": "getfpv",
                "existing_category": "battery",
            }
        },
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def coerce_text(cls, v):
        """Scraped fields may arrive as None."""
        if v is None:
            return ""
        return str(v)

    @field_validator("existing_category", mode="before")
    @classmethod
    def coerce_category(cls, v):
        """Stored categories come from older catalogs as loose strings."""
        if v is None or isinstance(v, Category):
            return v
        return Category.parse(str(v))

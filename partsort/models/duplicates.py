"""Pydantic models for duplicate candidate matching."""
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from partsort.models.listing import Category


class DuplicateAction(str, Enum):
    """What the caller should do with a duplicate candidate."""
    AUTO_MERGE = "auto_merge"
    NEEDS_REVIEW = "needs_review"


class CatalogFingerprint(BaseModel):
    """Normalized signals of one catalog entry.

    Attributes:
        candidate_id: Catalog identifier, opaque to the engine
        name: Normalized name
        brand: Canonical brand key, if detected
        category: Classified category
        specs: Numeric spec kind -> set of values ("kv" -> {"1900"})
    """

    candidate_id: str
    name: str
    brand: Optional[str] = None
    category: Category = Category.UNKNOWN
    specs: Dict[str, FrozenSet[str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class DuplicateCandidate(BaseModel):
    """An existing catalog entry suspected to be the same physical product."""

    candidate_id: str
    similarity: float = Field(..., ge=0, le=1)
    action: DuplicateAction
    reasons: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "candidate_id": "prod-1842",
                "similarity": 0.94,
                "action": "auto_merge",
                "reasons": ["name_similarity", "same_brand", "same_category"],
            }
        },
    )

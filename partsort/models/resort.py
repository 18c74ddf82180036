"""Models for bulk resort runs and reports."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from partsort.models.classification import ClassificationMethod
from partsort.models.listing import Category, Listing
from partsort.models.reasons import ReasonCode


class ResortItem(BaseModel):
    """A catalog listing submitted to a resort run."""

    id: str
    listing: Listing

    model_config = ConfigDict(frozen=True)


class ResortChange(BaseModel):
    """A listing whose category should change."""

    id: str
    name: str
    old_category: Optional[Category]
    new_category: Category
    confidence: int = Field(..., ge=0, le=100)
    method: ClassificationMethod
    reasoning: List[ReasonCode] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)


class ResortError(BaseModel):
    """A listing the resort run failed to process."""

    id: str
    error: str


class ResortSummary(BaseModel):
    """Aggregate outcome of a resort run.

    ``changes`` is the persistence diff; re-running the same resort over an
    already-correct catalog produces an empty one.
    """

    total_processed: int = 0
    reclassified: int = 0
    unchanged: int = 0
    changes: List[ResortChange] = Field(default_factory=list)
    errors: List[ResortError] = Field(default_factory=list)
    cancelled: bool = False
    rule_table_version: Optional[int] = None


class Misclassification(BaseModel):
    """A listing whose stored category disagrees with the engine."""

    id: str
    name: str
    category: Optional[Category]
    expected_category: Category
    confidence: int = Field(..., ge=0, le=100)


class ResortReport(BaseModel):
    """Read-only view of category health across a catalog."""

    category_distribution: Dict[str, int] = Field(default_factory=dict)
    brand_breakdown: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    potential_misclassifications: List[Misclassification] = Field(default_factory=list)

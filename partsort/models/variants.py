"""Pydantic models for variant bundling and split plans."""
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from partsort.models.listing import Listing


class VariantType(str, Enum):
    """Spec dimension a bundled listing enumerates."""
    KV = "kv"
    CAPACITY = "capacity"
    CELLS = "cells"
    CURRENT = "current"
    SIZE = "size"


class VariantGroup(BaseModel):
    """Enumerated values of one type found in a single listing.

    Attributes:
        base_name: Listing name with the enumerated value list removed
        variant_type: Which spec is enumerated
        values: Distinct values in listing order, lower-cased with unit
        unit: Display unit ("KV", "mAh", "S", "A", "")
    """

    base_name: str
    variant_type: VariantType
    values: List[str] = Field(..., min_length=2)
    unit: str = ""

    model_config = ConfigDict(frozen=True)


class SplitPlan(BaseModel):
    """Proposed decomposition of a bundled listing.

    The engine never performs the split; persisting the children is the
    caller's job.
    """

    original_listing: Listing
    group: VariantGroup
    children: List[Listing] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def child_names(self) -> List[str]:
        return [child.name for child in self.children]

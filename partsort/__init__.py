"""Drone-part classification and variant-resolution engine."""
from partsort.engine import ClassificationEngine, PartClassificationEngine, create_engine
from partsort.models import Category, ClassificationResult, Listing

__version__ = "0.1.0"

__all__ = [
    "ClassificationEngine",
    "PartClassificationEngine",
    "create_engine",
    "Category",
    "ClassificationResult",
    "Listing",
]

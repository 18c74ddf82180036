"""Data models for the classification engine."""

from partsort.models.listing import Category, Listing
from partsort.models.reasons import ReasonCode, WarningCode
from partsort.models.signals import Signal, SignalKind, TextField
from partsort.models.classification import (
    CategoryScore,
    ClassificationMethod,
    ClassificationResult,
    RuleClass,
    RuleHit,
)
from partsort.models.variants import SplitPlan, VariantGroup, VariantType
from partsort.models.duplicates import (
    CatalogFingerprint,
    DuplicateAction,
    DuplicateCandidate,
)
from partsort.models.feedback import FeedbackEntry
from partsort.models.resort import (
    Misclassification,
    ResortChange,
    ResortError,
    ResortItem,
    ResortReport,
    ResortSummary,
)

__all__ = [
    "Category",
    "Listing",
    "ReasonCode",
    "WarningCode",
    "Signal",
    "SignalKind",
    "TextField",
    "CategoryScore",
    "ClassificationMethod",
    "ClassificationResult",
    "RuleClass",
    "RuleHit",
    "SplitPlan",
    "VariantGroup",
    "VariantType",
    "CatalogFingerprint",
    "DuplicateAction",
    "DuplicateCandidate",
    "FeedbackEntry",
    "Misclassification",
    "ResortChange",
    "ResortError",
    "ResortItem",
    "ResortReport",
    "ResortSummary",
]

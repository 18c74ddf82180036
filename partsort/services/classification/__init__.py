"""Category scoring, disambiguation and confidence aggregation."""
from partsort.services.classification.aggregator import ConfidenceAggregator
from partsort.services.classification.classifier import ProductClassifier
from partsort.services.classification.disambiguator import Decision, Disambiguator
from partsort.services.classification.scorers import (
    CATEGORY_PRIORITY,
    SCORER_REGISTRY,
    BatteryScorer,
    CameraScorer,
    CategoryScorer,
    FrameScorer,
    MotorScorer,
    PropScorer,
    SignalSet,
    StackScorer,
    create_scorers,
)

__all__ = [
    "ConfidenceAggregator",
    "ProductClassifier",
    "Decision",
    "Disambiguator",
    "CATEGORY_PRIORITY",
    "SCORER_REGISTRY",
    "BatteryScorer",
    "CameraScorer",
    "CategoryScorer",
    "FrameScorer",
    "MotorScorer",
    "PropScorer",
    "SignalSet",
    "StackScorer",
    "create_scorers",
]

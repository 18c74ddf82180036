"""Human feedback capture and offline weight tuning."""
from partsort.services.feedback.log import FeedbackLog
from partsort.services.feedback.tuner import WeightTuner

__all__ = ["FeedbackLog", "WeightTuner"]

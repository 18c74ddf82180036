"""Human feedback on classification outcomes."""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from partsort.models.listing import Category


class FeedbackEntry(BaseModel):
    """A category assigned by an admin reviewer.

    Consumed only by the offline weight tuner, never during classification.
    """

    listing_fingerprint: str = Field(..., min_length=1)
    human_assigned_category: Category
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)

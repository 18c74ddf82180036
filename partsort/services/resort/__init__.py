"""Bulk resort of catalog listings."""
from partsort.services.resort.service import ResortService

__all__ = ["ResortService"]

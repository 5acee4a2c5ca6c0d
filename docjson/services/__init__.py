"""Extraction pipeline services."""

from docjson.services.extractor import ExtractionOrchestrator, ExtractionOutcome
from docjson.services.pricing import PricingRate, PricingTable

__all__ = [
    "ExtractionOrchestrator",
    "ExtractionOutcome",
    "PricingRate",
    "PricingTable",
]

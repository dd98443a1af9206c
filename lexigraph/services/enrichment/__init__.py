"""Clients for the frequency and translation services and the per-ingestion cache."""

from lexigraph.services.enrichment.context import IngestionContext, default_context
from lexigraph.services.enrichment.frequency import FrequencyClient, FrequencyData
from lexigraph.services.enrichment.translation import TranslatedDefinitions, TranslationClient

__all__ = [
    "FrequencyClient",
    "FrequencyData",
    "IngestionContext",
    "TranslatedDefinitions",
    "TranslationClient",
    "default_context",
]

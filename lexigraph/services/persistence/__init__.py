"""Persistence Engine: upserts, endpoint resolution and transactional ingestion."""

from lexigraph.services.persistence.engine import IngestionResult, PersistenceEngine
from lexigraph.services.persistence.resolver import EndpointResolver

__all__ = [
    "EndpointResolver",
    "IngestionResult",
    "PersistenceEngine",
]

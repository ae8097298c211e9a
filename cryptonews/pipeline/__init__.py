"""Pipeline orchestration."""

from .ingest import IngestionOrchestrator

__all__ = ["IngestionOrchestrator"]

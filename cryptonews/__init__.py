"""Crypto news ingestion and AI annotation pipeline."""

__version__ = "0.1.0"

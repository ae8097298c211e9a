"""Command line interface for cryptonews."""

"""Syndicated news ingestion pipeline and query API."""

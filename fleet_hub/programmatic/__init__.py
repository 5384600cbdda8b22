"""Programmatic page pipeline: entities, content, links, metadata and structured data."""

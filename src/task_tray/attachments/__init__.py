"""Clipboard and file ingestion into managed attachment storage."""

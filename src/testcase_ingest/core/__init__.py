"""Configuration and logging for the ingestion job."""

"""Helpers shared by ingestion and the command line."""

"""Shared infrastructure: configuration, database access, errors, logging and LLM plumbing."""

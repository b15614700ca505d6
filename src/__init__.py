"""Job Copilot core: shared utilities, prompt templates and services."""

"""Package marker for the Job Copilot HTTP API (FastAPI)."""

__version__ = "1.0.0"

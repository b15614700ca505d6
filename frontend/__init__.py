"""
Python client for the Job Copilot API.

JobCopilotClient wraps the HTTP routes; SessionState keeps auth and UI
state for one session on top of a client.
"""

from .api_client import ApiError, ClientConfig, JobCopilotClient
from .state import AuthState, Notification, SessionState, UIState

__all__ = [
    "ApiError",
    "ClientConfig",
    "JobCopilotClient",
    "AuthState",
    "Notification",
    "SessionState",
    "UIState",
]

"""
Portal command-line client built on a pure state core.
"""

from app.client.api import ApiError, NetworkError, PortalAPI
from app.client.controller import FileTokenStore, MemoryTokenStore, PortalController
from app.client.state import ClientState, View

__all__ = [
    "ApiError",
    "NetworkError",
    "PortalAPI",
    "PortalController",
    "FileTokenStore",
    "MemoryTokenStore",
    "ClientState",
    "View",
]

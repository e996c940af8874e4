"""CareNav integration clients.

All clients implement ``BaseIntegration``.  Clients that talk to paid
services run in mock mode when no real credentials are configured.
"""

from carenav.integrations.ai_client import AIClient
from carenav.integrations.base import BaseIntegration
from carenav.integrations.storage import StorageClient

__all__ = [
    "AIClient",
    "BaseIntegration",
    "StorageClient",
]

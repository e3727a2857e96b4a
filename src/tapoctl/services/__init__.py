"""Device services for tapoctl."""

from .base import BaseService
from .plug_client import (
    DeviceConnectionError,
    DeviceRequestError,
    PlugClient,
    PlugClientError,
    PowerStateError,
)

__all__ = [
    # Base Service
    "BaseService",
    # Plug Client
    "PlugClient",
    "PlugClientError",
    "DeviceConnectionError",
    "DeviceRequestError",
    "PowerStateError",
]

"""Provider adapter interface, concrete adapters and their factory."""

from __future__ import annotations

from .base import DefaultProviderAdapter, ProviderAdapter
from .factory import ProviderType, create_provider_adapter
from .google import GoogleAdapter
from .openrouter import OpenRouterAdapter

__all__ = [
    "DefaultProviderAdapter",
    "GoogleAdapter",
    "OpenRouterAdapter",
    "ProviderAdapter",
    "ProviderType",
    "create_provider_adapter",
]

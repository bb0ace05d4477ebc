"""Lookup from provider identifiers to adapter instances."""

from __future__ import annotations

from enum import Enum

from .base import DefaultProviderAdapter, ProviderAdapter
from .google import GoogleAdapter
from .openrouter import OpenRouterAdapter


class ProviderType(str, Enum):
    """Closed set of upstream providers the agent can be configured with."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"
    OPENROUTER = "openrouter"
    AZURE = "azure"
    OLLAMA = "ollama"
    LMSTUDIO = "lmstudio"
    BEDROCK = "bedrock"
    GATEWAY = "gateway"
    OPENAI_COMPATIBLE = "openai-compatible"


def create_provider_adapter(
    provider: ProviderType | str | None,
    *,
    upstream_provider: ProviderType | str | None = None,
) -> ProviderAdapter:
    """Return a fresh adapter for ``provider``.

    A gateway proxies to another vendor, so its adapter follows
    ``upstream_provider`` when one is given. Identifiers without special
    requirements, including unrecognized ones, get the no-op adapter.
    """

    kind = _resolve(provider)
    if kind is ProviderType.GATEWAY and upstream_provider is not None:
        upstream = _resolve(upstream_provider)
        if upstream is not ProviderType.GATEWAY:
            kind = upstream

    if kind is ProviderType.GOOGLE:
        return GoogleAdapter()
    if kind is ProviderType.OPENROUTER:
        return OpenRouterAdapter()
    return DefaultProviderAdapter()


def _resolve(provider: ProviderType | str | None) -> ProviderType | None:
    if isinstance(provider, ProviderType):
        return provider
    if not isinstance(provider, str):
        return None
    try:
        return ProviderType(provider.strip().lower())
    except ValueError:
        return None

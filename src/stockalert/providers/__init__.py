"""Quote provider registry."""

from __future__ import annotations

from stockalert.config import ProviderType
from stockalert.providers.base import BaseQuoteProvider

# Lazy registry: classes imported on demand so finnhub-python is only
# needed when the Finnhub provider is used.
PROVIDER_CLASSES: dict[ProviderType, str] = {
    ProviderType.FINNHUB: "stockalert.providers.finnhub.FinnhubProvider",
    ProviderType.MOCK: "stockalert.providers.mock.MockProvider",
}


def create_provider(
    provider_type: ProviderType,
    **kwargs,
) -> BaseQuoteProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseQuoteProvider", "PROVIDER_CLASSES", "create_provider"]

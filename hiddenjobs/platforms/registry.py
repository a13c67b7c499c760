"""URL-to-adapter lookup."""

import logging

from hiddenjobs.platforms.adapters import (
    ADPAdapter,
    AshbyAdapter,
    GenericCareerPageAdapter,
    GreenhouseAdapter,
    LeverAdapter,
    WorkableAdapter,
    WorkdayAdapter,
)
from hiddenjobs.platforms.base import ExtractionAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Vendor adapters tried in registration order, with a generic fallback."""

    def __init__(self, fallback: ExtractionAdapter | None = None) -> None:
        self._adapters: dict[str, ExtractionAdapter] = {}
        self.fallback = fallback or GenericCareerPageAdapter()

    def register(self, adapter: ExtractionAdapter) -> None:
        if adapter.platform_id in self._adapters:
            logger.warning("Replacing adapter for %s", adapter.platform_id)
        self._adapters[adapter.platform_id] = adapter

    def adapter_for(self, url: str) -> ExtractionAdapter:
        for adapter in self._adapters.values():
            if adapter.matches(url):
                return adapter
        return self.fallback

    def __len__(self) -> int:
        return len(self._adapters)


def default_registry() -> AdapterRegistry:
    registry = AdapterRegistry()
    for adapter in (
        GreenhouseAdapter(),
        LeverAdapter(),
        AshbyAdapter(),
        WorkdayAdapter(),
        WorkableAdapter(),
        ADPAdapter(),
    ):
        registry.register(adapter)
    return registry

"""Route a conversion request to the plugin registered for its target token."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .categories import supported_formats
from .errors import UnsupportedFormatError
from .models import ConversionRequest
from .plugins import REGISTRY, PluginRegistry
from .plugins.base import ConversionInput, ConversionOutput


class ConversionDispatcher:
    def __init__(self, registry: PluginRegistry | None = None) -> None:
        self.registry = registry or REGISTRY

    def formats(self) -> list[str]:
        return self.registry.formats()

    def dispatch(self, request: ConversionRequest, metadata: Optional[Dict[str, Any]] = None) -> ConversionOutput:
        """Run the matching plugin; codec errors propagate to the caller."""

        target = request.target_format.lower()
        try:
            plugin = self.registry.get(target)
        except KeyError:
            raise UnsupportedFormatError(
                "Unsupported output format",
                context={"supported_formats": supported_formats()},
            ) from None

        return plugin.convert(
            ConversionInput(
                source=request.source,
                target_format=target,
                quality=request.quality,
                include_metadata=request.include_metadata,
                metadata=metadata,
            )
        )


__all__ = ["ConversionDispatcher"]

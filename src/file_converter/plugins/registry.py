"""Plugin registry mapping target-format tokens to conversion strategies."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Type

import yaml

from .base import ConversionPlugin


DEFAULT_PLUGIN_MODULES: Sequence[str] = (
    "file_converter.plugins.builtin.images",
    "file_converter.plugins.builtin.pdf",
    "file_converter.plugins.builtin.html",
    "file_converter.plugins.builtin.text",
    "file_converter.plugins.builtin.markdown",
    "file_converter.plugins.builtin.structured",
    "file_converter.plugins.builtin.xml",
    "file_converter.plugins.builtin.csv",
    "file_converter.plugins.builtin.excel",
    "file_converter.plugins.builtin.svg",
)


class PluginRegistry:
    def __init__(self) -> None:
        self._registry: Dict[str, Type[ConversionPlugin]] = {}

    def register(self, plugin_cls: Type[ConversionPlugin]) -> None:
        keys = [fmt.lower() for fmt in plugin_cls.target_formats]
        if not keys:
            raise ValueError(f"{plugin_cls.__name__} declares no target formats")
        for key in keys:
            if key in self._registry:
                raise ValueError(f"Plugin already registered for {key}")
        for key in keys:
            self._registry[key] = plugin_cls

    def get(self, target: str) -> ConversionPlugin:
        key = target.lower()
        if key not in self._registry:
            raise KeyError(f"No plugin registered for {target}")
        return self._registry[key]()

    def formats(self) -> List[str]:
        return sorted(self._registry)

    def list(self) -> Iterable[ConversionPlugin]:
        for plugin_cls in dict.fromkeys(self._registry.values()):
            yield plugin_cls()


REGISTRY = PluginRegistry()


def load_plugins(module_names: Iterable[str] | None = None) -> None:
    """Import plugin modules and trigger their registration side-effects."""

    modules = list(module_names or DEFAULT_PLUGIN_MODULES)
    for module in modules:
        import_module(module)


def read_plugin_module_file(path: str | Path) -> List[str]:
    file_path = Path(path)
    if not file_path.exists():
        return []

    with file_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    modules = data.get("modules", []) if isinstance(data, dict) else []
    return [str(module) for module in modules]


__all__ = [
    "REGISTRY",
    "DEFAULT_PLUGIN_MODULES",
    "PluginRegistry",
    "load_plugins",
    "read_plugin_module_file",
]

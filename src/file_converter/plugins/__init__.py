"""Plugin package exports and convenience loaders."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .registry import (
	DEFAULT_PLUGIN_MODULES,
	REGISTRY,
	PluginRegistry,
	load_plugins,
	read_plugin_module_file,
)

if TYPE_CHECKING:  # pragma: no cover - import guard for type checkers
	from file_converter.config import Settings


def _modules_from_settings(settings: "Settings | None") -> List[str]:
	if not settings:
		return []

	explicit = [module for module in settings.plugin_modules if module]
	if explicit:
		return explicit

	if settings.plugin_modules_file:
		return read_plugin_module_file(settings.plugin_modules_file)

	return []


def load_plugins_from_settings(settings: "Settings | None" = None) -> List[str]:
	"""Load plugin modules named in settings, else the builtin set; return what was loaded."""

	modules = _modules_from_settings(settings) or list(DEFAULT_PLUGIN_MODULES)
	load_plugins(modules)
	return modules


__all__ = [
	"REGISTRY",
	"DEFAULT_PLUGIN_MODULES",
	"PluginRegistry",
	"load_plugins",
	"load_plugins_from_settings",
]

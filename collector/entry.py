from __future__ import annotations

import logging
from typing import Collection, Iterable, List, Set

from .descriptor import TypeDescriptor
from .errors import ModuleLoadError
from .model import ModuleFile
from .provider import TypeProvider

logger = logging.getLogger(__name__)


def collect_entry_types(
	provider: TypeProvider,
	modules: Iterable[ModuleFile],
	markers: Collection[str],
) -> Set[TypeDescriptor]:
	"""Find every declared type that has one of the marker classes among its ancestors.

	All modules are enumerated before any ancestry is checked, so markers and
	entry types may live in different modules. A module that fails to load
	contributes no types.
	"""
	declared: List[TypeDescriptor] = []
	for module in modules:
		try:
			declared.extend(provider.declared_types(module))
		except ModuleLoadError as e:
			logger.warning("Skipping module %s: %s", module.rel_path, e.reason)

	names = set(markers)
	entries = {t for t in declared if provider.implements(t, names)}
	logger.debug("Found %d entry types among %d declared types", len(entries), len(declared))
	return entries

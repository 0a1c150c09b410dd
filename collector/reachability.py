"""Fixed-point discovery of the models reachable from the entry types.

The builder runs three phases, in order:

- COLLECT_DIRECT: models referenced by the public instance methods of the
  entry types.
- EXPAND_DERIVED: one level of subtypes declared in the same module as each
  of those models.
- CLOSE_PROPERTIES: the transitive closure over property types.

Sets only ever grow. Each model's properties are expanded at most once, which
breaks reference cycles and bounds the work by the number of declared types.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Set

from .descriptor import TypeDescriptor
from .policy import ExclusionPolicy
from .provider import TypeProvider
from .resolver import effective_type, models_from_method, resolve_referenced_models

logger = logging.getLogger(__name__)


class Phase(str, Enum):
	COLLECT_DIRECT = "collect_direct"
	EXPAND_DERIVED = "expand_derived"
	CLOSE_PROPERTIES = "close_properties"
	DONE = "done"


@dataclass
class Reachability:
	entry_types: Set[TypeDescriptor]
	implementing: Set[TypeDescriptor]
	models: Set[TypeDescriptor]


class ReachabilityBuilder:
	def __init__(self, provider: TypeProvider, policy: ExclusionPolicy):
		self.provider = provider
		self.policy = policy
		self.phase = Phase.COLLECT_DIRECT

	def _advance(self, phase: Phase) -> None:
		logger.debug("Reachability %s -> %s", self.phase.value, phase.value)
		self.phase = phase

	def build(self, entry_types: Iterable[TypeDescriptor]) -> Reachability:
		entries = set(entry_types)
		implementing = self.collect_direct(entries)
		models = self.expand_derived(implementing)
		self.close_properties(models)
		self._advance(Phase.DONE)
		return Reachability(entry_types=entries, implementing=implementing, models=models)

	def collect_direct(self, entry_types: Iterable[TypeDescriptor]) -> Set[TypeDescriptor]:
		implementing: Set[TypeDescriptor] = set()
		for entry in entry_types:
			for method in entry.methods:
				implementing |= models_from_method(method, self.policy)
		logger.debug("%d models referenced by entry methods", len(implementing))
		self._advance(Phase.EXPAND_DERIVED)
		return implementing

	def expand_derived(self, implementing: Set[TypeDescriptor]) -> Set[TypeDescriptor]:
		models = set(implementing)
		for model in implementing:
			if model.module is None:
				continue
			for candidate in self.provider.module_types(model.module):
				if self.provider.is_strict_subtype(candidate, model) and self.policy.accepts(candidate):
					models.add(candidate)
		logger.debug("%d models after derived type expansion", len(models))
		self._advance(Phase.CLOSE_PROPERTIES)
		return models

	def close_properties(self, models: Set[TypeDescriptor]) -> Set[TypeDescriptor]:
		"""Grow models in place with everything reachable through properties."""
		visited: Set[TypeDescriptor] = set(models)
		pending: List[TypeDescriptor] = list(models)
		while pending:
			model = pending.pop()
			for prop in model.all_properties():
				if self.policy.ignores(prop.tags):
					continue
				for found in resolve_referenced_models(effective_type(prop), self.policy):
					if found in visited:
						continue
					visited.add(found)
					models.add(found)
					pending.append(found)
		logger.debug("%d models after property closure", len(models))
		return models

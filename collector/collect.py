from __future__ import annotations

import logging
import time
from typing import Iterable, List

from .config import CollectorOptions, ScanOptions
from .descriptor import TypeDescriptor
from .entry import collect_entry_types
from .model import CollectResult
from .policy import ExclusionPolicy
from .provider import TypeProvider
from .reachability import ReachabilityBuilder
from .schema import generate_schemas, write_artifact

logger = logging.getLogger(__name__)


def _names(types: Iterable[TypeDescriptor]) -> List[str]:
	return sorted(t.qualified_name for t in types)


def collect(options: ScanOptions) -> CollectResult:
	"""Discover the models reachable from the entry types and build their schemas."""
	started = time.perf_counter()
	provider = TypeProvider(options.source)
	policy = ExclusionPolicy.from_options(options)

	modules = provider.load_modules(options.modules)
	entry_types = collect_entry_types(provider, modules, options.entry_markers)
	reachability = ReachabilityBuilder(provider, policy).build(entry_types)
	schemas = generate_schemas(reachability.models, policy)

	return CollectResult(
		entry_types=_names(reachability.entry_types),
		implementing_models=_names(reachability.implementing),
		models=_names(reachability.models),
		failed_modules=sorted(provider.failures),
		schemas=schemas,
		elapsed_ms=(time.perf_counter() - started) * 1000,
	)


def run(options: CollectorOptions) -> CollectResult:
	"""Collect and write the schema artifact to the configured destination."""
	started = time.perf_counter()
	result = collect(options)
	write_artifact(options.destination, result.schemas)
	result.elapsed_ms = (time.perf_counter() - started) * 1000
	logger.debug("Wrote %d schemas to %s", len(result.schemas), options.destination)
	return result

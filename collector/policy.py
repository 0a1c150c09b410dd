from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_EXCLUDED_PREFIXES, DEFAULT_IGNORE_MARKER, ScanOptions
from .descriptor import TypeDescriptor, TypeKind


# no-payload async wrappers; their generic forms carry a payload and are unwrapped instead
TASK_TYPES = frozenset(
	{
		"asyncio.Task",
		"asyncio.Future",
		"asyncio.tasks.Task",
		"asyncio.futures.Future",
		"typing.Awaitable",
		"typing.Coroutine",
		"collections.abc.Awaitable",
		"collections.abc.Coroutine",
	}
)

STRING_TYPE = "builtins.str"

MODEL_KINDS = (TypeKind.CLASS, TypeKind.ENUM)


class ExclusionPolicy:
	"""Decides which types may be traversed and which may become models."""

	def __init__(
		self,
		ignore_marker: str = DEFAULT_IGNORE_MARKER,
		excluded_prefixes: Iterable[str] = DEFAULT_EXCLUDED_PREFIXES,
	):
		self.ignore_marker = ignore_marker
		self.excluded_prefixes = tuple(excluded_prefixes)

	@classmethod
	def from_options(cls, options: ScanOptions) -> ExclusionPolicy:
		return cls(ignore_marker=options.ignore_marker, excluded_prefixes=options.excluded_prefixes)

	def ignores(self, tags: Iterable[str]) -> bool:
		suffix = "." + self.ignore_marker
		return any(tag == self.ignore_marker or tag.endswith(suffix) for tag in tags)

	def is_excluded(self, t: TypeDescriptor) -> bool:
		return self.ignores(t.tags) or t.qualified_name in TASK_TYPES

	def is_model(self, t: TypeDescriptor) -> bool:
		if t.kind not in MODEL_KINDS:
			return False
		if t.qualified_name == STRING_TYPE or not t.namespace:
			return False
		return not t.qualified_name.startswith(self.excluded_prefixes)

	def accepts(self, t: TypeDescriptor) -> bool:
		return self.is_model(t) and not self.is_excluded(t)

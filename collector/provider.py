from __future__ import annotations

import logging
import os
from typing import Collection, Dict, Iterable, List, Optional

from .ast_parse import parse_python_module
from .descriptor import (
	ArrayType,
	DeclaredType,
	GenericType,
	OtherType,
	PrimitiveType,
	TypeDescriptor,
	TypeKind,
)
from .errors import ModuleLoadError
from .fs_scan import scan_modules
from .model import ArrayRef, GenericRef, ModuleFacts, ModuleFile, TypeRef

logger = logging.getLogger(__name__)


PRIMITIVE_TYPES = frozenset(
	{
		"builtins.str",
		"builtins.int",
		"builtins.float",
		"builtins.bool",
		"builtins.bytes",
		"builtins.bytearray",
		"builtins.complex",
		"builtins.object",
		"builtins.None",
		"typing.Any",
		"decimal.Decimal",
		"datetime.datetime",
		"datetime.date",
		"datetime.time",
		"datetime.timedelta",
		"uuid.UUID",
	}
)

ENUM_BASES = frozenset({"enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"})
PROTOCOL_BASES = frozenset({"typing.Protocol"})


class TypeProvider:
	"""Static type provider over the python sources below a root directory.

	Modules are parsed with :mod:`ast`, never imported. Descriptors are cached
	by key so that every reference to a type yields the same object.
	"""

	def __init__(self, root: str):
		self.root = root
		self.failures: Dict[str, str] = {}
		self._facts: Dict[str, ModuleFacts] = {}
		self._by_module: Dict[str, List[DeclaredType]] = {}
		self._declared: Dict[str, DeclaredType] = {}
		self._cache: Dict[str, TypeDescriptor] = {}

	def load_modules(self, patterns: Iterable[str]) -> List[ModuleFile]:
		handles: List[ModuleFile] = []
		for f in scan_modules(self.root, patterns):
			if not os.access(f.path, os.R_OK):
				self.failures[f.path] = "file is not readable"
				logger.warning("Skipping module %s: file is not readable", f.rel_path)
				continue
			handles.append(f)
		logger.debug("Found %d loadable modules under %s", len(handles), self.root)
		return handles

	def declared_types(self, handle: ModuleFile) -> List[DeclaredType]:
		"""Enumerate the classes declared by a module, parsing it on first use.

		Raises ModuleLoadError when the module cannot be read or parsed.
		"""
		facts = self._facts.get(handle.path)
		if facts is None:
			facts = self._parse(handle)
			self._register(facts)
		return list(self._by_module.get(facts.module, []))

	def _parse(self, handle: ModuleFile) -> ModuleFacts:
		try:
			with open(handle.path, "r", encoding="utf-8") as fh:
				text = fh.read()
			return parse_python_module(handle.module, handle.path, text, is_package=handle.is_package)
		except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
			self.failures[handle.path] = str(e)
			raise ModuleLoadError(handle.path, str(e)) from e

	def _register(self, facts: ModuleFacts) -> None:
		self._facts[facts.path] = facts
		declared = [DeclaredType(info, self) for info in facts.types]
		self._by_module[facts.module] = declared
		for t in declared:
			self._declared[t.key] = t
		# earlier resolutions may have missed types declared here
		self._cache = dict(self._declared)

	def module_types(self, module: str) -> List[DeclaredType]:
		return list(self._by_module.get(module, []))

	def get(self, qualified_name: str) -> Optional[DeclaredType]:
		return self._declared.get(qualified_name)

	def resolve(self, ref: TypeRef) -> TypeDescriptor:
		key = ref.key()
		cached = self._cache.get(key)
		if cached is not None:
			return cached
		if isinstance(ref, ArrayRef):
			t: TypeDescriptor = ArrayType(key, self.resolve(ref.element), unique=ref.unique)
		elif isinstance(ref, GenericRef):
			t = GenericType(key, ref.origin, tuple(self.resolve(a) for a in ref.args))
		elif ref.name in PRIMITIVE_TYPES:
			t = PrimitiveType(key, key)
		else:
			t = OtherType(key, key)
		self._cache[key] = t
		return t

	def ancestors(self, t: TypeDescriptor) -> List[TypeDescriptor]:
		"""All transitive bases of t, nearest first."""
		result: List[TypeDescriptor] = []
		seen = {t.key}
		queue = list(t.bases)
		while queue:
			base = queue.pop(0)
			if base.key in seen:
				continue
			seen.add(base.key)
			result.append(base)
			queue.extend(base.bases)
		return result

	def implements(self, t: TypeDescriptor, capabilities: Collection[str]) -> bool:
		for ancestor in self.ancestors(t):
			if ancestor.qualified_name in capabilities or ancestor.name in capabilities:
				return True
		return False

	def is_strict_subtype(self, candidate: TypeDescriptor, base: TypeDescriptor) -> bool:
		return candidate != base and base in self.ancestors(candidate)

	def classify(self, t: DeclaredType) -> TypeKind:
		if any(b.qualified_name in PROTOCOL_BASES for b in t.bases):
			return TypeKind.INTERFACE
		if any(a.qualified_name in ENUM_BASES for a in self.ancestors(t)):
			return TypeKind.ENUM
		return TypeKind.CLASS

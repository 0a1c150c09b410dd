"""Read-only views over the types found in the scanned sources.

Each view is one variant of :class:`TypeKind` and only carries the fields that
are meaningful to it: an array knows its element type, a generic knows its
origin and arguments, and a declared class knows its bases, properties and
methods. Identity is the ``key``: two descriptors are equal iff they denote
the same declared (or constructed) type.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .model import EnumMember, GenericRef, NamedRef, TypeInfo, TypeRef

if TYPE_CHECKING:
	from .provider import TypeProvider


class TypeKind(str, Enum):
	CLASS = "class"
	ENUM = "enum"
	INTERFACE = "interface"
	PRIMITIVE = "primitive"
	ARRAY = "array"
	GENERIC = "generic"
	OTHER = "other"


def namespace_of(qualified_name: str) -> str:
	if "." in qualified_name:
		return qualified_name.rsplit(".", 1)[0]
	return ""


def base_name(ref: TypeRef) -> Optional[str]:
	"""Name of the class a base expression refers to (``Base[T]`` -> ``Base``)."""
	if isinstance(ref, NamedRef):
		return ref.name
	if isinstance(ref, GenericRef):
		return ref.origin
	return None


class TypeDescriptor:
	kind: TypeKind = TypeKind.OTHER

	def __init__(
		self,
		key: str,
		qualified_name: str,
		namespace: Optional[str] = None,
		module: Optional[str] = None,
		tags: Iterable[str] = (),
	):
		self.key = key
		self.qualified_name = qualified_name
		self.namespace = namespace_of(qualified_name) if namespace is None else namespace
		self.module = module
		self.tags: FrozenSet[str] = frozenset(tags)

	@property
	def name(self) -> str:
		return self.qualified_name.rsplit(".", 1)[-1]

	@property
	def bases(self) -> Tuple[TypeDescriptor, ...]:
		return ()

	@property
	def base_type(self) -> Optional[TypeDescriptor]:
		bases = self.bases
		return bases[0] if bases else None

	@property
	def generic_arguments(self) -> Tuple[TypeDescriptor, ...]:
		return ()

	@property
	def element_type(self) -> Optional[TypeDescriptor]:
		return None

	@property
	def properties(self) -> Tuple[PropertyDescriptor, ...]:
		return ()

	@property
	def methods(self) -> Tuple[MethodDescriptor, ...]:
		return ()

	def all_properties(self) -> List[PropertyDescriptor]:
		return list(self.properties)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, TypeDescriptor):
			return NotImplemented
		return self.key == other.key

	def __hash__(self) -> int:
		return hash(self.key)

	def __repr__(self) -> str:
		return f"<{type(self).__name__} {self.key}>"


class PrimitiveType(TypeDescriptor):
	kind = TypeKind.PRIMITIVE


class OtherType(TypeDescriptor):
	kind = TypeKind.OTHER


class ArrayType(TypeDescriptor):
	kind = TypeKind.ARRAY

	def __init__(self, key: str, element_type: TypeDescriptor, unique: bool = False):
		super().__init__(key, key, namespace="")
		self._element_type = element_type
		self.unique = unique

	@property
	def element_type(self) -> TypeDescriptor:
		return self._element_type


class GenericType(TypeDescriptor):
	kind = TypeKind.GENERIC

	def __init__(self, key: str, origin: str, arguments: Tuple[TypeDescriptor, ...]):
		super().__init__(key, key, namespace=namespace_of(origin))
		self.origin = origin
		self._arguments = arguments

	@property
	def generic_arguments(self) -> Tuple[TypeDescriptor, ...]:
		return self._arguments


@dataclass(frozen=True)
class PropertyDescriptor:
	name: str
	type: TypeDescriptor
	has_default: bool = False
	tags: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class ParameterDescriptor:
	name: str
	type: Optional[TypeDescriptor]
	tags: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class MethodDescriptor:
	name: str
	return_type: Optional[TypeDescriptor]
	parameters: Tuple[ParameterDescriptor, ...] = ()


class DeclaredType(TypeDescriptor):
	"""A class statement found in a scanned module.

	Bases, properties and methods are resolved through the provider on first
	access, so every module must be loaded before they are read.
	"""

	def __init__(self, info: TypeInfo, provider: TypeProvider):
		super().__init__(
			info.qualified_name,
			info.qualified_name,
			namespace=info.module,
			module=info.module,
			tags=info.decorators,
		)
		self.info = info
		self._provider = provider

	@cached_property
	def kind(self) -> TypeKind:  # type: ignore[override]
		return self._provider.classify(self)

	@property
	def docstring(self) -> Optional[str]:
		return self.info.docstring

	@property
	def members(self) -> List[EnumMember]:
		return self.info.members

	@cached_property
	def bases(self) -> Tuple[TypeDescriptor, ...]:  # type: ignore[override]
		names = [base_name(b) for b in self.info.bases]
		return tuple(self._provider.resolve(NamedRef(name=n)) for n in names if n)

	@cached_property
	def properties(self) -> Tuple[PropertyDescriptor, ...]:  # type: ignore[override]
		return tuple(
			PropertyDescriptor(
				name=p.name,
				type=self._provider.resolve(p.annotation),
				has_default=p.has_default,
				tags=frozenset(p.tags),
			)
			for p in self.info.properties
		)

	@cached_property
	def methods(self) -> Tuple[MethodDescriptor, ...]:  # type: ignore[override]
		resolve = self._provider.resolve
		return tuple(
			MethodDescriptor(
				name=m.name,
				return_type=resolve(m.returns) if m.returns is not None else None,
				parameters=tuple(
					ParameterDescriptor(
						name=p.name,
						type=resolve(p.annotation) if p.annotation is not None else None,
						tags=frozenset(p.tags),
					)
					for p in m.parameters
				),
			)
			for m in self.info.methods
		)

	def all_properties(self, _seen: Optional[Set[str]] = None) -> List[PropertyDescriptor]:  # type: ignore[override]
		"""Declared and inherited properties; a subclass overrides its bases."""
		seen = _seen if _seen is not None else set()
		seen.add(self.key)
		merged: Dict[str, PropertyDescriptor] = {}
		for base in reversed(self.bases):
			if isinstance(base, DeclaredType) and base.key not in seen:
				for prop in base.all_properties(seen):
					merged[prop.name] = prop
		for prop in self.properties:
			merged[prop.name] = prop
		return list(merged.values())

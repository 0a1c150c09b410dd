from __future__ import annotations

from typing import Set

from .descriptor import MethodDescriptor, PropertyDescriptor, TypeDescriptor, TypeKind
from .policy import ExclusionPolicy


UNWRAPPED_KINDS = (TypeKind.GENERIC, TypeKind.ARRAY)


def resolve_referenced_models(t: TypeDescriptor, policy: ExclusionPolicy) -> Set[TypeDescriptor]:
	"""Models referenced by a type, looking through arrays, generics and bases.

	Array and generic wrappers are never models themselves; an accepted base
	type is always surfaced so that class hierarchies stay representable.
	"""
	if policy.is_excluded(t):
		return set()

	found: Set[TypeDescriptor] = set()
	if t.kind is TypeKind.ARRAY:
		found |= resolve_referenced_models(t.element_type, policy)
	elif policy.is_model(t):
		found.add(t)
	elif t.kind is TypeKind.GENERIC:
		for arg in t.generic_arguments:
			if policy.is_model(arg) or arg.kind in UNWRAPPED_KINDS:
				found |= resolve_referenced_models(arg, policy)

	for base in t.bases:
		if policy.accepts(base):
			found.add(base)
	return found


def models_from_method(method: MethodDescriptor, policy: ExclusionPolicy) -> Set[TypeDescriptor]:
	found: Set[TypeDescriptor] = set()
	if method.return_type is not None:
		found |= resolve_referenced_models(method.return_type, policy)
	for parameter in method.parameters:
		if parameter.type is None or policy.ignores(parameter.tags):
			continue
		found |= resolve_referenced_models(parameter.type, policy)
	return found


def effective_type(prop: PropertyDescriptor) -> TypeDescriptor:
	"""Unwrap a single-argument generic container (``Optional[X]`` -> ``X``)."""
	arguments = prop.type.generic_arguments
	if prop.type.kind is TypeKind.GENERIC and len(arguments) == 1:
		return arguments[0]
	return prop.type

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional

from .descriptor import DeclaredType, TypeDescriptor, TypeKind
from .errors import OutputWriteError
from .model import SchemaDocument
from .policy import ExclusionPolicy


JSON_PRIMITIVES: Dict[str, Dict[str, Any]] = {
	"builtins.str": {"type": "string"},
	"builtins.int": {"type": "integer"},
	"builtins.float": {"type": "number"},
	"builtins.bool": {"type": "boolean"},
	"builtins.bytes": {"type": "string", "format": "binary"},
	"builtins.bytearray": {"type": "string", "format": "binary"},
	"builtins.None": {"type": "null"},
	"decimal.Decimal": {"type": "number"},
	"datetime.datetime": {"type": "string", "format": "date-time"},
	"datetime.date": {"type": "string", "format": "date"},
	"datetime.time": {"type": "string", "format": "time"},
	"datetime.timedelta": {"type": "string", "format": "duration"},
	"uuid.UUID": {"type": "string", "format": "uuid"},
}

UNION_ORIGINS = {"typing.Union", "typing.Optional"}

MAPPING_ORIGINS = {
	"builtins.dict",
	"typing.Dict",
	"typing.Mapping",
	"typing.MutableMapping",
	"typing.DefaultDict",
	"typing.OrderedDict",
	"collections.OrderedDict",
	"collections.defaultdict",
	"collections.abc.Mapping",
	"collections.abc.MutableMapping",
}

# wrappers whose schema is the schema of their single argument
TRANSPARENT_ORIGINS = {"typing.Final", "typing.Required", "typing.NotRequired", "typing.ReadOnly"}


def _is_optional(t: TypeDescriptor) -> bool:
	if t.kind is not TypeKind.GENERIC:
		return False
	origin = getattr(t, "origin", "")
	if origin == "typing.Optional":
		return True
	return origin == "typing.Union" and any(a.qualified_name == "builtins.None" for a in t.generic_arguments)


def property_schema(t: TypeDescriptor) -> Dict[str, Any]:
	if t.kind is TypeKind.PRIMITIVE:
		return dict(JSON_PRIMITIVES.get(t.qualified_name, {}))
	if t.kind in (TypeKind.CLASS, TypeKind.ENUM):
		return {"$ref": t.qualified_name}
	if t.kind is TypeKind.ARRAY:
		schema: Dict[str, Any] = {"type": "array", "items": property_schema(t.element_type)}
		if getattr(t, "unique", False):
			schema["uniqueItems"] = True
		return schema
	if t.kind is TypeKind.GENERIC:
		origin = getattr(t, "origin", "")
		arguments = t.generic_arguments
		if origin in UNION_ORIGINS:
			options = [property_schema(a) for a in arguments]
			if origin == "typing.Optional":
				options.append({"type": "null"})
			return options[0] if len(options) == 1 else {"anyOf": options}
		if origin in MAPPING_ORIGINS:
			schema = {"type": "object"}
			if len(arguments) == 2:
				schema["additionalProperties"] = property_schema(arguments[1])
			return schema
		if origin in TRANSPARENT_ORIGINS and len(arguments) == 1:
			return property_schema(arguments[0])
	return {}


def _enum_schema(t: DeclaredType) -> SchemaDocument:
	values: List[Any] = [m.value for m in t.members]
	if any(v is None for v in values):
		values = [m.name for m in t.members]
	json_type: Optional[str] = None
	if values and all(isinstance(v, str) for v in values):
		json_type = "string"
	elif values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
		json_type = "integer"
	return SchemaDocument(
		id=t.qualified_name,
		title=t.name,
		description=t.docstring,
		type=json_type,
		enum=values,
	)


def generate_schema(t: TypeDescriptor, policy: Optional[ExclusionPolicy] = None) -> SchemaDocument:
	"""Build the JSON schema document of one model.

	Properties carrying the policy's ignore marker are left out.
	"""
	if not isinstance(t, DeclaredType):
		return SchemaDocument(id=t.qualified_name, title=t.name)
	if t.kind is TypeKind.ENUM:
		return _enum_schema(t)

	props = [p for p in t.all_properties() if policy is None or not policy.ignores(p.tags)]
	required = [p.name for p in props if not p.has_default and not _is_optional(p.type)]
	return SchemaDocument(
		id=t.qualified_name,
		title=t.name,
		description=t.docstring,
		type="object",
		properties={p.name: property_schema(p.type) for p in props},
		required=required or None,
	)


def generate_schemas(models: Iterable[TypeDescriptor], policy: Optional[ExclusionPolicy] = None) -> List[SchemaDocument]:
	documents = {t.key: generate_schema(t, policy) for t in models}
	return [documents[key] for key in sorted(documents)]


def write_artifact(path: str, schemas: Iterable[SchemaDocument]) -> None:
	payload = [s.to_json() for s in schemas]
	try:
		os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
		with open(path, "w", encoding="utf-8") as fh:
			json.dump(payload, fh, indent=2)
	except OSError as e:
		raise OutputWriteError(f"cannot write {path}: {e}") from e

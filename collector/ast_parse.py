from __future__ import annotations

import ast
import builtins
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .fs_scan import parent_module
from .model import (
	ArrayRef,
	EnumMember,
	GenericRef,
	MethodInfo,
	ModuleFacts,
	NamedRef,
	ParameterInfo,
	PropertyInfo,
	TypeInfo,
	TypeRef,
)


ARRAY_ORIGINS: Set[str] = {
	"builtins.list",
	"builtins.set",
	"builtins.frozenset",
	"typing.List",
	"typing.Set",
	"typing.FrozenSet",
	"typing.AbstractSet",
	"typing.MutableSet",
	"typing.Sequence",
	"typing.MutableSequence",
	"typing.Collection",
	"typing.Iterable",
	"typing.Iterator",
	"typing.Deque",
	"collections.deque",
	"collections.abc.Set",
	"collections.abc.MutableSet",
	"collections.abc.Sequence",
	"collections.abc.MutableSequence",
	"collections.abc.Collection",
	"collections.abc.Iterable",
	"collections.abc.Iterator",
}

SET_ORIGINS: Set[str] = {
	"builtins.set",
	"builtins.frozenset",
	"typing.Set",
	"typing.FrozenSet",
	"typing.AbstractSet",
	"typing.MutableSet",
	"collections.abc.Set",
	"collections.abc.MutableSet",
}

TUPLE_ORIGINS: Set[str] = {"builtins.tuple", "typing.Tuple"}

UNION_ORIGIN = "typing.Union"
ANNOTATED_ORIGIN = "typing.Annotated"
CLASSVAR_ORIGIN = "typing.ClassVar"
LITERAL_ORIGIN = "typing.Literal"

PROPERTY_DECORATORS: Set[str] = {"property", "cached_property", "abstractproperty"}
NON_INSTANCE_DECORATORS: Set[str] = {"staticmethod", "classmethod"}


def _normalize(name: str) -> str:
	if name.startswith("typing_extensions."):
		return "typing." + name[len("typing_extensions."):]
	return name


def _dotted_name(node: ast.AST) -> Optional[str]:
	parts: List[str] = []
	cursor = node
	while isinstance(cursor, ast.Attribute):
		parts.append(cursor.attr)
		cursor = cursor.value  # type: ignore[assignment]
	if isinstance(cursor, ast.Name):
		parts.append(cursor.id)
		return ".".join(reversed(parts))
	return None


def _get_decorator_names(node: ast.AST) -> List[str]:
	decorators: List[str] = []
	for deco in getattr(node, "decorator_list", []) or []:
		if isinstance(deco, ast.Call):
			deco = deco.func
		name = _dotted_name(deco)
		decorators.append(name if name is not None else ast.unparse(deco))
	return decorators


def _last_segment(name: str) -> str:
	return name.rsplit(".", 1)[-1]


def _is_private(name: str) -> bool:
	return name.startswith("_")


def _slice_elements(node: ast.Subscript) -> List[ast.expr]:
	if isinstance(node.slice, ast.Tuple):
		return list(node.slice.elts)
	return [node.slice]


def _is_ellipsis(node: ast.AST) -> bool:
	return isinstance(node, ast.Constant) and node.value is Ellipsis


def _literal(node: Optional[ast.AST]) -> Any:
	if node is None:
		return None
	try:
		value = ast.literal_eval(node)
	except (ValueError, TypeError, SyntaxError):
		return None
	if value is None or isinstance(value, (str, int, float, bool)):
		return value
	return None


def _top_level(statements: List[ast.stmt]) -> Iterator[ast.stmt]:
	# `if TYPE_CHECKING:` and `try: import` blocks still bind module names
	for stmt in statements:
		if isinstance(stmt, ast.If):
			yield from _top_level(stmt.body)
			yield from _top_level(stmt.orelse)
		elif isinstance(stmt, ast.Try):
			yield from _top_level(stmt.body)
			for handler in stmt.handlers:
				yield from _top_level(handler.body)
			yield from _top_level(stmt.orelse)
		else:
			yield stmt


def _import_base(node: ast.ImportFrom, module: str, is_package: bool) -> str:
	if not node.level:
		return node.module or ""
	package = module if is_package else parent_module(module)
	parts = package.split(".") if package else []
	up = node.level - 1
	if up:
		parts = parts[:-up] if up < len(parts) else []
	if node.module:
		parts.append(node.module)
	return ".".join(parts)


def _collect_imports(tree: ast.Module, module: str, is_package: bool) -> Dict[str, str]:
	imports: Dict[str, str] = {}
	for node in _top_level(tree.body):
		if isinstance(node, ast.Import):
			for alias in node.names:
				if alias.asname:
					imports[alias.asname] = alias.name
				else:
					head = alias.name.split(".", 1)[0]
					imports[head] = head
		elif isinstance(node, ast.ImportFrom):
			base = _import_base(node, module, is_package)
			for alias in node.names:
				if alias.name == "*":
					continue
				target = f"{base}.{alias.name}" if base else alias.name
				imports[alias.asname or alias.name] = _normalize(target)
	return imports


class _Scope:
	"""Name resolution for annotations inside one module."""

	def __init__(self, module: str, imports: Dict[str, str], local_names: Set[str]):
		self.module = module
		self.imports = imports
		self.local_names = local_names

	def qualify(self, dotted: str) -> str:
		head, _, rest = dotted.partition(".")
		if head in self.local_names:
			target = f"{self.module}.{head}"
		elif head in self.imports:
			target = self.imports[head]
		elif hasattr(builtins, head):
			target = f"builtins.{head}"
		else:
			target = f"{self.module}.{head}"
		return _normalize(f"{target}.{rest}" if rest else target)

	def origin(self, node: ast.AST) -> str:
		dotted = _dotted_name(node)
		return self.qualify(dotted) if dotted is not None else ast.unparse(node)

	def unquote(self, node: ast.AST) -> ast.AST:
		if isinstance(node, ast.Constant) and isinstance(node.value, str):
			try:
				return ast.parse(node.value.strip(), mode="eval").body
			except SyntaxError:
				return node
		return node

	def is_classvar(self, node: ast.AST) -> bool:
		node = self.unquote(node)
		if isinstance(node, ast.Subscript):
			node = node.value
		return self.origin(node) == CLASSVAR_ORIGIN

	def annotation(self, node: Optional[ast.AST]) -> Tuple[Optional[TypeRef], List[str]]:
		"""Convert an annotation to a type reference plus its ``Annotated`` tags."""
		if node is None:
			return None, []
		node = self.unquote(node)
		if isinstance(node, ast.Subscript) and self.origin(node.value) == ANNOTATED_ORIGIN:
			elements = _slice_elements(node)
			ref, tags = self.annotation(elements[0])
			for meta in elements[1:]:
				tag = self._tag(meta)
				if tag:
					tags.append(tag)
			return ref, tags
		return self.to_ref(node), []

	def _tag(self, node: ast.AST) -> Optional[str]:
		if isinstance(node, ast.Call):
			node = node.func
		if isinstance(node, ast.Constant) and isinstance(node.value, str):
			return node.value
		return _dotted_name(node)

	def to_ref(self, node: ast.AST) -> TypeRef:
		node = self.unquote(node)
		if isinstance(node, ast.Constant):
			if node.value is None:
				return NamedRef(name="builtins.None")
			return NamedRef(name=repr(node.value))
		if isinstance(node, (ast.Name, ast.Attribute)):
			dotted = _dotted_name(node)
			if dotted is not None:
				return NamedRef(name=self.qualify(dotted))
		if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
			return GenericRef(origin=UNION_ORIGIN, args=self._union_args(node))
		if isinstance(node, ast.Subscript):
			return self._subscript(node)
		return NamedRef(name=ast.unparse(node))

	def _union_args(self, node: ast.AST) -> List[TypeRef]:
		if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
			return self._union_args(node.left) + self._union_args(node.right)
		return [self.to_ref(node)]

	def _subscript(self, node: ast.Subscript) -> TypeRef:
		origin = self.origin(node.value)
		elements = _slice_elements(node)
		if origin == ANNOTATED_ORIGIN:
			return self.to_ref(elements[0])
		if origin == LITERAL_ORIGIN:
			return GenericRef(origin=origin)
		if origin in ARRAY_ORIGINS:
			return ArrayRef(element=self.to_ref(elements[0]), unique=origin in SET_ORIGINS)
		if origin in TUPLE_ORIGINS and len(elements) == 2 and _is_ellipsis(elements[1]):
			return ArrayRef(element=self.to_ref(elements[0]))
		return GenericRef(origin=origin, args=[self.to_ref(e) for e in elements if not _is_ellipsis(e)])


def _parse_method(node: ast.AST, scope: _Scope) -> MethodInfo:
	args = node.args  # type: ignore[attr-defined]
	# the first positional argument is the instance
	positional = (list(args.posonlyargs) + list(args.args))[1:]
	declared = positional + ([args.vararg] if args.vararg else []) + list(args.kwonlyargs)
	if args.kwarg:
		declared.append(args.kwarg)
	parameters: List[ParameterInfo] = []
	for arg in declared:
		ref, tags = scope.annotation(arg.annotation)
		parameters.append(ParameterInfo(name=arg.arg, annotation=ref, tags=tags))
	returns, _ = scope.annotation(node.returns)  # type: ignore[attr-defined]
	return MethodInfo(
		name=node.name,  # type: ignore[attr-defined]
		parameters=parameters,
		returns=returns,
	)


def _init_attributes(node: ast.AST, scope: _Scope) -> List[PropertyInfo]:
	attributes: List[PropertyInfo] = []
	for stmt in node.body:  # type: ignore[attr-defined]
		if not isinstance(stmt, ast.AnnAssign):
			continue
		target = stmt.target
		if not (isinstance(target, ast.Attribute) and isinstance(target.value, ast.Name)):
			continue
		if target.value.id != "self" or _is_private(target.attr):
			continue
		ref, tags = scope.annotation(stmt.annotation)
		if ref is not None:
			attributes.append(
				PropertyInfo(name=target.attr, annotation=ref, has_default=stmt.value is not None, tags=tags)
			)
	return attributes


def _parse_class(node: ast.ClassDef, scope: _Scope) -> TypeInfo:
	properties: List[PropertyInfo] = []
	methods: List[MethodInfo] = []
	members: List[EnumMember] = []
	init_attributes: List[PropertyInfo] = []

	for sub in node.body:
		if isinstance(sub, ast.AnnAssign) and isinstance(sub.target, ast.Name):
			name = sub.target.id
			if _is_private(name) or scope.is_classvar(sub.annotation):
				continue
			ref, tags = scope.annotation(sub.annotation)
			if ref is not None:
				properties.append(
					PropertyInfo(name=name, annotation=ref, has_default=sub.value is not None, tags=tags)
				)
		elif isinstance(sub, ast.Assign):
			for target in sub.targets:
				if isinstance(target, ast.Name) and not _is_private(target.id):
					members.append(EnumMember(name=target.id, value=_literal(sub.value)))
		elif isinstance(sub, (ast.FunctionDef, ast.AsyncFunctionDef)):
			decorators = _get_decorator_names(sub)
			simple = {_last_segment(d) for d in decorators}
			if sub.name == "__init__":
				init_attributes = _init_attributes(sub, scope)
				continue
			if _is_private(sub.name) or simple & NON_INSTANCE_DECORATORS:
				continue
			if any(d.endswith((".setter", ".deleter")) for d in decorators):
				continue
			if simple & PROPERTY_DECORATORS:
				ref, tags = scope.annotation(sub.returns)
				if ref is not None:
					properties.append(PropertyInfo(name=sub.name, annotation=ref, has_default=True, tags=tags))
				continue
			methods.append(_parse_method(sub, scope))

	known = {p.name for p in properties}
	properties.extend(p for p in init_attributes if p.name not in known)

	return TypeInfo(
		name=node.name,
		module=scope.module,
		bases=[scope.to_ref(b) for b in node.bases],
		decorators=_get_decorator_names(node),
		docstring=ast.get_docstring(node),
		properties=properties,
		methods=methods,
		members=members,
	)


def parse_python_module(module_name: str, path: str, text: str, is_package: bool = False) -> ModuleFacts:
	tree = ast.parse(text, filename=path)
	imports = _collect_imports(tree, module_name, is_package)
	classes = [node for node in tree.body if isinstance(node, ast.ClassDef)]
	scope = _Scope(module_name, imports, {c.name for c in classes})
	return ModuleFacts(
		module=module_name,
		path=path,
		imports=imports,
		types=[_parse_class(c, scope) for c in classes],
	)

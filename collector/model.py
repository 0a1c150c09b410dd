from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NamedRef(BaseModel):
	kind: Literal["named"] = "named"
	name: str

	def key(self) -> str:
		return self.name


class ArrayRef(BaseModel):
	kind: Literal["array"] = "array"
	element: TypeRef
	unique: bool = False

	def key(self) -> str:
		container = "set" if self.unique else "list"
		return f"{container}[{self.element.key()}]"


class GenericRef(BaseModel):
	kind: Literal["generic"] = "generic"
	origin: str
	args: List[TypeRef] = []

	def key(self) -> str:
		return f"{self.origin}[{', '.join(a.key() for a in self.args)}]"


TypeRef = Annotated[Union[NamedRef, ArrayRef, GenericRef], Field(discriminator="kind")]

ArrayRef.model_rebuild()
GenericRef.model_rebuild()


class ModuleFile(BaseModel):
	path: str
	rel_path: str
	module: str
	is_package: bool = False


class PropertyInfo(BaseModel):
	name: str
	annotation: TypeRef
	has_default: bool = False
	tags: List[str] = []


class ParameterInfo(BaseModel):
	name: str
	annotation: Optional[TypeRef] = None
	tags: List[str] = []


class MethodInfo(BaseModel):
	name: str
	parameters: List[ParameterInfo] = []
	returns: Optional[TypeRef] = None


class EnumMember(BaseModel):
	name: str
	value: Any = None


class TypeInfo(BaseModel):
	name: str
	module: str
	bases: List[TypeRef] = []
	decorators: List[str] = []
	docstring: Optional[str] = None
	properties: List[PropertyInfo] = []
	methods: List[MethodInfo] = []
	members: List[EnumMember] = []

	@property
	def qualified_name(self) -> str:
		return f"{self.module}.{self.name}"


class ModuleFacts(BaseModel):
	module: str
	path: str
	imports: Dict[str, str] = {}
	types: List[TypeInfo] = []


class SchemaDocument(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: str = Field(alias="$id")
	title: str
	description: Optional[str] = None
	type: Optional[str] = None
	properties: Optional[Dict[str, Dict[str, Any]]] = None
	required: Optional[List[str]] = None
	enum: Optional[List[Any]] = None

	def to_json(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True, exclude_none=True)


class CollectResult(BaseModel):
	entry_types: List[str]
	implementing_models: List[str]
	models: List[str]
	failed_modules: List[str] = []
	schemas: List[SchemaDocument] = []
	elapsed_ms: float = 0.0

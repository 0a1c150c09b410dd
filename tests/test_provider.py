import pytest

from collector.descriptor import TypeKind
from collector.errors import ModuleLoadError
from collector.model import ArrayRef, GenericRef, NamedRef
from collector.provider import TypeProvider


ZOO = {
	"zoo/__init__.py": "",
	"zoo/animals.py": """
		import enum
		from typing import Generic, List, Protocol, TypeVar

		T = TypeVar("T")

		class Kind(str, enum.Enum):
			MAMMAL = "mammal"

		class Special(Kind):
			pass

		class Feeder(Protocol):
			def feed(self) -> None:
				...

		class Animal:
			name: str

		class Dog(Animal):
			breed: str
			name: int

		class Puppy(Dog):
			pass

		class Page(Generic[T]):
			items: List[T]
		""",
}


def test_kinds(make_universe):
	u = make_universe(ZOO)
	assert u["zoo.animals.Kind"].kind is TypeKind.ENUM
	assert u["zoo.animals.Special"].kind is TypeKind.ENUM
	assert u["zoo.animals.Feeder"].kind is TypeKind.INTERFACE
	assert u["zoo.animals.Dog"].kind is TypeKind.CLASS

	resolve = u.provider.resolve
	assert resolve(NamedRef(name="builtins.str")).kind is TypeKind.PRIMITIVE
	assert resolve(NamedRef(name="somelib.Thing")).kind is TypeKind.OTHER
	array = resolve(ArrayRef(element=NamedRef(name="zoo.animals.Dog")))
	assert array.kind is TypeKind.ARRAY
	assert array.element_type is u["zoo.animals.Dog"]
	generic = resolve(GenericRef(origin="typing.Optional", args=[NamedRef(name="zoo.animals.Dog")]))
	assert generic.kind is TypeKind.GENERIC
	assert generic.generic_arguments == (u["zoo.animals.Dog"],)


def test_descriptors_are_cached_and_compared_by_identity(make_universe):
	u = make_universe(ZOO)
	ref = GenericRef(origin="typing.Optional", args=[NamedRef(name="zoo.animals.Dog")])
	assert u.provider.resolve(ref) is u.provider.resolve(ref)
	assert u.provider.resolve(NamedRef(name="zoo.animals.Dog")) is u["zoo.animals.Dog"]
	assert len({u["zoo.animals.Dog"], u.provider.get("zoo.animals.Dog")}) == 1


def test_hierarchy(make_universe):
	u = make_universe(ZOO)
	animal, dog, puppy = u["zoo.animals.Animal"], u["zoo.animals.Dog"], u["zoo.animals.Puppy"]
	assert puppy.base_type is dog
	assert u.provider.ancestors(puppy) == [dog, animal]
	assert u.provider.is_strict_subtype(puppy, animal)
	assert not u.provider.is_strict_subtype(animal, animal)
	assert u.provider.implements(puppy, {"Animal"})
	assert u.provider.implements(puppy, {"zoo.animals.Dog"})
	assert not u.provider.implements(animal, {"Animal"})
	assert u["zoo.animals.Page"].base_type.qualified_name == "typing.Generic"


def test_all_properties_include_inherited(make_universe):
	u = make_universe(ZOO)
	props = {p.name: p.type.qualified_name for p in u["zoo.animals.Puppy"].all_properties()}
	assert props == {"name": "builtins.int", "breed": "builtins.str"}


def test_inheritance_cycle_terminates(make_universe):
	u = make_universe(
		{
			"loop.py": """
				class A(B):
					x: int

				class B(A):
					y: int
				""",
		}
	)
	a, b = u["loop.A"], u["loop.B"]
	assert u.provider.ancestors(a) == [b]
	assert {p.name for p in a.all_properties()} == {"x", "y"}


def test_unparseable_module_raises_and_is_recorded(tmp_path):
	(tmp_path / "broken.py").write_text("class Broken(:\n")
	provider = TypeProvider(str(tmp_path))
	[module] = provider.load_modules(["*.py"])
	with pytest.raises(ModuleLoadError):
		provider.declared_types(module)
	assert str(tmp_path / "broken.py") in provider.failures

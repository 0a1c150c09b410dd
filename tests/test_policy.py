from collector.descriptor import OtherType, PrimitiveType
from collector.model import GenericRef, NamedRef
from collector.policy import ExclusionPolicy


SOURCES = {
	"app/__init__.py": "",
	"app/models.py": """
		import enum
		import markers

		class Widget:
			size: int

		class Color(enum.Enum):
			RED = 1

		@schema_ignore
		class Hidden:
			pass

		@markers.schema_ignore()
		class AlsoHidden:
			pass

		@skip_me
		class Custom:
			pass
		""",
	"vendor/lib.py": """
		class Thing:
			pass
		""",
}


def test_models_are_declared_classes_and_enums(make_universe, policy):
	u = make_universe(SOURCES)
	assert policy.is_model(u["app.models.Widget"])
	assert policy.is_model(u["app.models.Color"])
	assert not policy.is_model(PrimitiveType("builtins.str", "builtins.str"))
	assert not policy.is_model(OtherType("somelib.Thing", "somelib.Thing"))
	generic = u.provider.resolve(GenericRef(origin="typing.List", args=[NamedRef(name="app.models.Widget")]))
	assert not policy.is_model(generic)


def test_excluded_prefixes(make_universe):
	u = make_universe(SOURCES)
	assert ExclusionPolicy().is_model(u["vendor.lib.Thing"])
	assert not ExclusionPolicy(excluded_prefixes=["vendor."]).is_model(u["vendor.lib.Thing"])


def test_ignore_marker(make_universe, policy):
	u = make_universe(SOURCES)
	assert policy.is_excluded(u["app.models.Hidden"])
	assert policy.is_excluded(u["app.models.AlsoHidden"])
	assert not policy.accepts(u["app.models.Hidden"])
	assert policy.is_model(u["app.models.Hidden"])
	assert not policy.is_excluded(u["app.models.Custom"])
	assert ExclusionPolicy(ignore_marker="skip_me").is_excluded(u["app.models.Custom"])


def test_task_wrappers_are_excluded(policy):
	assert policy.is_excluded(OtherType("asyncio.Task", "asyncio.Task"))
	assert policy.is_excluded(OtherType("typing.Awaitable", "typing.Awaitable"))
	assert not policy.is_excluded(OtherType("typing.Awaitable[app.Widget]", "typing.Awaitable[app.Widget]"))


def test_ignores_tags(policy):
	assert policy.ignores(["schema_ignore"])
	assert policy.ignores(["markers.schema_ignore"])
	assert not policy.ignores(["my_schema_ignore", "Doc"])

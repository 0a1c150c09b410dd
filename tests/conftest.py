from textwrap import dedent

import pytest

from collector.policy import ExclusionPolicy
from collector.provider import TypeProvider


SHOP = {
	"shop/__init__.py": "",
	"shop/base.py": """
		class Controller:
			pass
		""",
	"shop/models.py": """
		from typing import List, Optional

		class Entity:
			id: int

		class Person(Entity):
			name: str
			email: Optional[str] = None

		class LineItem:
			sku: str
			quantity: int

		class Order:
			\"\"\"A customer order.\"\"\"
			items: List[LineItem]
			customer: Person
		""",
	"shop/services.py": """
		from .base import Controller
		from .models import Order

		class OrderService(Controller):
			def get_order(self, id: int) -> Order:
				...

			def _helper(self) -> Order:
				...
		""",
}


def write_tree(root, files):
	for rel_path, source in files.items():
		path = root / rel_path
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(dedent(source))
	return root


class Universe:
	"""A provider with every module under a temporary root loaded."""

	def __init__(self, root):
		self.provider = TypeProvider(str(root))
		self.modules = self.provider.load_modules(["**/*.py"])
		for module in self.modules:
			self.provider.declared_types(module)

	def __getitem__(self, qualified_name):
		t = self.provider.get(qualified_name)
		assert t is not None, qualified_name
		return t


@pytest.fixture
def make_universe(tmp_path):
	def factory(files):
		return Universe(write_tree(tmp_path, files))
	return factory


@pytest.fixture
def policy():
	return ExclusionPolicy()


@pytest.fixture
def shop_root(tmp_path):
	return write_tree(tmp_path, SHOP)

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


DEFAULT_MODULE_PATTERNS: List[str] = ["**/*.py"]
DEFAULT_IGNORE_MARKER = "schema_ignore"
DEFAULT_EXCLUDED_PREFIXES: List[str] = [
	"builtins.",
	"typing.",
	"collections.",
	"enum.",
	"abc.",
	"asyncio.",
	"datetime.",
	"decimal.",
	"uuid.",
	"pydantic.",
	"fastapi.",
	"starlette.",
]


class ScanOptions(BaseModel):
	source: str
	modules: List[str] = Field(default_factory=lambda: list(DEFAULT_MODULE_PATTERNS), min_length=1)
	entry_markers: List[str] = Field(min_length=1)
	ignore_marker: str = DEFAULT_IGNORE_MARKER
	excluded_prefixes: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES))
	verbose: bool = False


class CollectorOptions(ScanOptions):
	destination: str


def _describe(error: ValidationError) -> str:
	problems = []
	for err in error.errors():
		location = ".".join(str(part) for part in err["loc"]) or "options"
		problems.append(f"{location}: {err['msg']}")
	return "; ".join(problems)


def load_options(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> CollectorOptions:
	"""Build the options for one run from a JSON file and command line overrides.

	Overrides whose value is None are ignored. Any missing or malformed field
	raises ConfigurationError, as does a source root that is not a directory.
	"""
	data: Dict[str, Any] = {}
	if path is not None:
		try:
			with open(path, "r", encoding="utf-8") as fh:
				data = json.load(fh)
		except OSError as e:
			raise ConfigurationError(f"cannot read options file {path}: {e}") from e
		except json.JSONDecodeError as e:
			raise ConfigurationError(f"options file {path} is not valid JSON: {e}") from e
		if not isinstance(data, dict):
			raise ConfigurationError(f"options file {path} must contain a JSON object")

	for key, value in (overrides or {}).items():
		if value is not None:
			data[key] = value

	try:
		options = CollectorOptions.model_validate(data)
	except ValidationError as e:
		raise ConfigurationError(_describe(e)) from e

	if not os.path.isdir(options.source):
		raise ConfigurationError(f"source: {options.source} is not a directory")
	return options

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Set

from .model import ModuleFile


IGNORED_DIRS: Set[str] = {
	".git",
	".venv",
	"venv",
	"node_modules",
	"dist",
	"build",
	"__pycache__",
}


def module_name_for(rel_path: str) -> Optional[str]:
	"""Dotted module name of a source path relative to the scan root.

	Returns None for files below an ignored directory. A package's
	``__init__.py`` names the package itself.
	"""
	parts = list(Path(rel_path).with_suffix("").parts)
	if any(part in IGNORED_DIRS for part in parts[:-1]):
		return None
	if parts and parts[-1] == "__init__":
		parts.pop()
	return ".".join(part.replace("-", "_") for part in parts)


def parent_module(module_name: str) -> str:
	return module_name.rpartition(".")[0]


def scan_modules(root: str, patterns: Iterable[str]) -> List[ModuleFile]:
	"""Find python source files under root matching any of the glob patterns.

	Patterns are relative to root and follow pathlib semantics, so ``*.py``
	only matches the top level while ``**/*.py`` recurses.
	"""
	base = Path(root)
	seen: Set[str] = set()
	files: List[ModuleFile] = []
	for pattern in patterns:
		for path in base.glob(pattern):
			if not path.is_file() or path.suffix != ".py":
				continue
			rel_path = os.path.relpath(str(path), root)
			if rel_path in seen:
				continue
			seen.add(rel_path)
			module = module_name_for(rel_path)
			if not module:
				continue
			files.append(
				ModuleFile(
					path=str(path),
					rel_path=rel_path,
					module=module,
					is_package=path.name == "__init__.py",
				)
			)
	files.sort(key=lambda f: f.rel_path)
	return files

from __future__ import annotations

from typing import List

from .model import CollectResult


def _short_names(names: List[str]) -> str:
	return ", ".join(n.rsplit(".", 1)[-1] for n in names)


def summarize_run(result: CollectResult, verbose: bool = False) -> List[str]:
	lines: List[str] = [f"Found {len(result.entry_types)} entry models."]
	if verbose:
		lines.append(f"\t{_short_names(result.entry_types)}")
	lines.append(f"Found {len(result.implementing_models)} used models.")
	if verbose:
		lines.append(f"\t{_short_names(result.implementing_models)}")
	lines.append(f"Generating {len(result.models)} models.")
	if result.failed_modules:
		lines.append(f"Skipped {len(result.failed_modules)} modules that failed to load.")
		if verbose:
			lines.extend(f"\t{path}" for path in result.failed_modules)
	lines.append(f"Completed in {result.elapsed_ms:.0f}ms.")
	return lines

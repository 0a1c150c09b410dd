"""Collector package: discovers the model classes reachable from service classes
and emits a JSON schema document for each of them.

Modules:
- fs_scan.py: Locating python source files under a root by glob patterns.
- ast_parse.py: Python AST parsing of classes, annotations and imports.
- model.py: Pydantic data structures for parsed facts, schemas and results.
- descriptor.py: Read-only type views (class, enum, array, generic, ...).
- provider.py: Type provider resolving annotations to descriptors.
- policy.py: Exclusion rules deciding which types may become models.
- entry.py: Finding entry types by marker base classes.
- resolver.py: Unwrapping method and property types into referenced models.
- reachability.py: Fixed-point model discovery.
- schema.py: JSON schema generation and artifact writing.
- config.py: Run options.
- collect.py: The end-to-end pipeline.
- summarize.py: Console summary of a run.
"""

__all__ = [
	"fs_scan",
	"ast_parse",
	"model",
	"descriptor",
	"provider",
	"policy",
	"entry",
	"resolver",
	"reachability",
	"schema",
	"config",
	"collect",
	"summarize",
]

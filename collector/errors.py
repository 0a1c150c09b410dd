from __future__ import annotations


class CollectorError(Exception):
	"""Base class for errors reported to the user by the collector."""


class ConfigurationError(CollectorError):
	"""Options are missing or malformed; the run cannot start."""


class ModuleLoadError(CollectorError):
	"""A module could not be read or its types could not be enumerated."""

	def __init__(self, path: str, reason: str):
		super().__init__(f"{path}: {reason}")
		self.path = path
		self.reason = reason


class OutputWriteError(CollectorError):
	"""The schema artifact could not be written."""

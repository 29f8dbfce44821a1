# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records reported by the driver.

The scanner itself never produces diagnostics: malformed declarations simply
contribute no test items. Diagnostics come from the layers around it, i.e.
reading files and turning their text into a syntax tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a driver diagnostic (error/warning)."""

	message: str
	# Pipeline phase that produced the diagnostic: "driver" for file access
	# problems, "parser" for source the reader cannot tokenize or balance.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)

	def to_json(self) -> dict:
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
		}


__all__ = ["Diagnostic"]

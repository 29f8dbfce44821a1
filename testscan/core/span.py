# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to diagnostics.

A Span keeps whatever error object produced it in `raw` and carries the
best-effort file/line/column it could extract. Lines and columns are 1-based,
as reported by the lark lexer and parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw error object)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	def describe(self) -> str:
		"""Render as `file:line:column`, with `?` for unknown parts."""
		line = "?" if self.line is None else self.line
		column = "?" if self.column is None else self.column
		return f"{self.file or '?'}:{line}:{column}"


__all__ = ["Span"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Immutable view of one source document.

Test items are reported with language-server positions: zero-based lines and
characters counted in UTF-16 code units. The snapshot owns the conversion
from code-point offsets (what the syntax tree stores) to those positions.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Position:
	line: int
	character: int

	def to_json(self) -> dict:
		return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
	start: Position
	end: Position

	def to_json(self) -> dict:
		return {"start": self.start.to_json(), "end": self.end.to_json()}


def _utf16_length(text: str) -> int:
	return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


class DocumentSnapshot:
	"""Text of one document at one version, addressed by `uri`."""

	def __init__(self, uri: str, text: str, version: int = 0) -> None:
		self.uri = uri
		self.text = text
		self.version = version
		self._line_starts: List[int] = [0] + [m.end() for m in _LINE_BREAK.finditer(text)]

	@classmethod
	def from_path(cls, path: Path) -> "DocumentSnapshot":
		return cls(uri=path.resolve().as_uri(), text=path.read_text(encoding="utf-8"))

	def position_of(self, offset: int) -> Position:
		offset = min(max(offset, 0), len(self.text))
		line = bisect.bisect_right(self._line_starts, offset) - 1
		line_start = self._line_starts[line]
		return Position(line=line, character=_utf16_length(self.text[line_start:offset]))

	def range_of(self, start: int, end: int) -> Range:
		return Range(start=self.position_of(start), end=self.position_of(end))

	def __repr__(self) -> str:
		return f"DocumentSnapshot(uri={self.uri!r}, version={self.version})"


__all__ = ["DocumentSnapshot", "Position", "Range"]

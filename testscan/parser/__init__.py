# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Swift source reader used by test discovery.

`parse_snapshot` is the syntax-tree provider the scanner calls by default;
`parse_snapshot_with_diagnostics` is the driver-facing variant that reports a
malformed file as a `Diagnostic` instead of raising.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from testscan.core.diagnostics import Diagnostic
from testscan.core.snapshot import DocumentSnapshot
from testscan.core.span import Span

from . import ast
from .parser import SwiftParseError, parse_source


def parse_snapshot(snapshot: DocumentSnapshot) -> ast.SourceFile:
	"""Parse the text of `snapshot`; raises `SwiftParseError` on malformed input."""
	return parse_source(snapshot.text)


def parse_snapshot_with_diagnostics(
	snapshot: DocumentSnapshot,
	file: Optional[str] = None,
) -> Tuple[Optional[ast.SourceFile], List[Diagnostic]]:
	"""
	Parse `snapshot`, collecting a parser diagnostic instead of raising.

	`file` labels the diagnostic span; it defaults to the snapshot URI.
	"""
	try:
		tree = parse_snapshot(snapshot)
	except SwiftParseError as err:
		span = Span(file=file or snapshot.uri, line=err.line, column=err.column, raw=err)
		return None, [Diagnostic(message=str(err), phase="parser", severity="error", span=span)]
	return tree, []


__all__ = ["SwiftParseError", "parse_snapshot", "parse_snapshot_with_diagnostics", "parse_source"]

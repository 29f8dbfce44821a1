# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: scan Swift files for swift-testing tests.

Prints an outline of the discovered tests, or with --json a structured payload
(files with their test items, diagnostics and an exit_code). Directories are
scanned recursively for `*.swift` files in sorted order.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence, Tuple

from testscan.core.diagnostics import Diagnostic
from testscan.core.snapshot import DocumentSnapshot
from testscan.core.span import Span
from testscan.logging_config import setup_logging
from testscan.parser import parse_snapshot_with_diagnostics
from testscan.scanner import TestItem, may_contain_tests, scan_source_file

logger = logging.getLogger(__name__)


def _collect_sources(paths: Sequence[Path]) -> Tuple[List[Path], List[Diagnostic]]:
	sources: List[Path] = []
	diagnostics: List[Diagnostic] = []
	for path in paths:
		if path.is_dir():
			sources.extend(sorted(path.rglob("*.swift")))
		elif path.is_file():
			sources.append(path)
		else:
			diagnostics.append(
				Diagnostic(message=f"no such file or directory: {path}", phase="driver", span=Span(file=str(path)))
			)
	return sources, diagnostics


def _scan_path(path: Path) -> Tuple[List[TestItem], List[Diagnostic], str]:
	"""Scan one file; returns (items, diagnostics, uri)."""
	try:
		snapshot = DocumentSnapshot.from_path(path)
	except (OSError, UnicodeDecodeError) as err:
		return [], [Diagnostic(message=f"cannot read file: {err}", phase="driver", span=Span(file=str(path)))], str(path)
	if not may_contain_tests(snapshot.text):
		logger.debug("%s: no Suite/Test keyword, not scanning", path)
		return [], [], snapshot.uri
	tree, diagnostics = parse_snapshot_with_diagnostics(snapshot, file=str(path))
	if tree is None:
		return [], diagnostics, snapshot.uri
	return scan_source_file(snapshot, tree), diagnostics, snapshot.uri


def _outline(items: Sequence[TestItem], depth: int = 0) -> List[str]:
	lines: List[str] = []
	for item in items:
		line = f"{'  ' * depth}{item.label} [{item.id}]"
		if item.disabled:
			line += " (disabled)"
		if item.tags:
			line += " tags: " + ", ".join(tag.id for tag in item.tags)
		lines.append(line)
		lines.extend(_outline(item.children, depth + 1))
	return lines


def main(argv: list[str] | None = None) -> int:
	"""
	Scan the given files/directories and report their swift-testing tests.

	Exit code is 1 when any path could not be read or parsed, 0 otherwise.
	"""
	parser = argparse.ArgumentParser(description="Discover swift-testing tests in Swift sources without building them")
	parser.add_argument("source", type=Path, nargs="+", help="Swift source file(s) or directories to scan")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit test items and diagnostics as JSON",
	)
	parser.add_argument(
		"--log-level",
		default="WARNING",
		help="Logging level for messages on stderr (default: WARNING)",
	)
	args = parser.parse_args(argv)
	setup_logging(args.log_level)

	sources, diagnostics = _collect_sources(args.source)
	files: List[Tuple[Path, str, List[TestItem]]] = []
	for path in sources:
		items, file_diags, uri = _scan_path(path)
		diagnostics.extend(file_diags)
		if items:
			files.append((path, uri, items))
	exit_code = 1 if diagnostics else 0

	if args.json:
		payload = {
			"exit_code": exit_code,
			"files": [{"uri": uri, "tests": [item.to_json() for item in items]} for _path, uri, items in files],
			"diagnostics": [diag.to_json() for diag in diagnostics],
		}
		print(json.dumps(payload))
		return exit_code

	for path, _uri, items in files:
		print(f"{path}:")
		for line in _outline(items, depth=1):
			print(line)
	for diag in diagnostics:
		print(f"{diag.span.describe()}: {diag.severity}: {diag.message}", file=sys.stderr)
	return exit_code


__all__ = ["main"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
testscan: static discovery of swift-testing tests.

Reads Swift source without building it and reports `@Test` functions and
`@Suite` types as a tree of test items:

source text -> parser (lark token tree -> declaration syntax tree)
   -> scanner (attribute/trait classification, nested scopes)
   -> TestItem tree
"""

from testscan.core.snapshot import DocumentSnapshot
from testscan.parser import SwiftParseError, parse_snapshot, parse_source
from testscan.scanner import TestItem, find_test_symbols, may_contain_tests, scan_source_file

__all__ = [
	"DocumentSnapshot",
	"SwiftParseError",
	"TestItem",
	"find_test_symbols",
	"may_contain_tests",
	"parse_snapshot",
	"parse_source",
	"scan_source_file",
]

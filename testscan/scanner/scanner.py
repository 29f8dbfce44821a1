# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntactic swift-testing test discovery.

The scanner walks the declarations of one file and turns `@Test` functions
and `@Suite` (or test-holding) types into a tree of `TestItem`s. Nothing is
type checked: attributes and traits are recognized by their written names.

Each type scope is scanned by a fresh `SwiftTestingScanner` seeded with the
enclosing type names and whether an enclosing suite is disabled; the nested
scanner's result becomes the type item's children.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from testscan.core.snapshot import DocumentSnapshot
from testscan.parser import SwiftParseError, parse_snapshot
from testscan.parser.ast import (
	Attribute,
	CodeBlock,
	ExtensionDecl,
	FunctionDecl,
	IdentifierType,
	Item,
	SourceFile,
	TypeDecl,
)

from .attributes import TestingAttributeData
from .items import Location, TestItem, TestStyle, TestTag
from .names import (
	LEGACY_TEST_CASE_BASE,
	PREFILTER_KEYWORDS,
	SUITE_ATTRIBUTE,
	TEST_ATTRIBUTE,
	attribute_is_named,
	type_components,
)

logger = logging.getLogger(__name__)

# Protocols are not suites: their members are visited in the enclosing scope.
_CONTAINER_KINDS = frozenset({"struct", "class", "enum", "actor"})

SyntaxTreeProvider = Callable[[DocumentSnapshot], SourceFile]


class VisitAction(Enum):
	VISIT_CHILDREN = "visit_children"
	SKIP_CHILDREN = "skip_children"


def _children_of(item: Item) -> List[Item]:
	if isinstance(item, (TypeDecl, ExtensionDecl)):
		return item.members
	if isinstance(item, FunctionDecl):
		return item.body or []
	if isinstance(item, CodeBlock):
		return item.items
	return []


def _first_attribute_named(decl: Union[TypeDecl, ExtensionDecl, FunctionDecl], name: str) -> Optional[Attribute]:
	return next((attribute for attribute in decl.attributes if attribute_is_named(attribute, name)), None)


def _inherits_legacy_test_case(decl: Union[TypeDecl, ExtensionDecl]) -> bool:
	if not decl.inherited:
		return False
	first = decl.inherited[0]
	return isinstance(first, IdentifierType) and first.name == LEGACY_TEST_CASE_BASE


def declared_test_name(decl: FunctionDecl) -> str:
	"""`name(first:second:)`, the identifier that selects this exact overload when running tests."""
	labels = "".join(f"{param.first_name}:" for param in decl.params)
	return f"{decl.name}({labels})"


class SwiftTestingScanner:
	"""Collects the test items of one declaration scope into `result`, in source order."""

	def __init__(
		self,
		snapshot: DocumentSnapshot,
		*,
		all_tests_disabled: bool = False,
		parent_type_names: Sequence[str] = (),
	) -> None:
		self._snapshot = snapshot
		self._all_tests_disabled = all_tests_disabled
		self._parent_type_names: Tuple[str, ...] = tuple(parent_type_names)
		self.result: List[TestItem] = []

	def walk(self, items: Sequence[Item]) -> None:
		for item in items:
			if self._visit(item) is VisitAction.VISIT_CHILDREN:
				self.walk(_children_of(item))

	def _visit(self, item: Item) -> VisitAction:
		if isinstance(item, TypeDecl) and item.kind in _CONTAINER_KINDS:
			return self._visit_type_or_extension(item, [item.name])
		if isinstance(item, ExtensionDecl):
			components = type_components(item.extended_type)
			if components is None:
				return VisitAction.SKIP_CHILDREN
			return self._visit_type_or_extension(item, components)
		if isinstance(item, FunctionDecl):
			return self._visit_function(item)
		return VisitAction.VISIT_CHILDREN

	def _location(self, item: Item) -> Location:
		return Location(uri=self._snapshot.uri, range=self._snapshot.range_of(item.loc.start, item.loc.end))

	def _visit_type_or_extension(self, decl: Union[TypeDecl, ExtensionDecl], type_names: Sequence[str]) -> VisitAction:
		"""
		Scan a type or extension and record it when it is a suite or holds tests.

		`type_names` is the type's name, or for an extension the components of
		the extended type (`extension Foo.Bar` -> ["Foo", "Bar"]).
		"""
		assert type_names, "type and extension scopes contribute at least one name"
		names = self._parent_type_names + tuple(type_names)
		if _inherits_legacy_test_case(decl):
			logger.debug("skipping %s: %s subclass", "/".join(names), LEGACY_TEST_CASE_BASE)
			return VisitAction.SKIP_CHILDREN

		suite_attribute = _first_attribute_named(decl, SUITE_ATTRIBUTE)
		data = TestingAttributeData.from_attribute(suite_attribute) if suite_attribute is not None else None
		if data is not None and data.is_hidden:
			logger.debug("skipping hidden suite %s", "/".join(names))
			return VisitAction.SKIP_CHILDREN

		disabled = (data is not None and data.is_disabled) or self._all_tests_disabled
		member_scanner = SwiftTestingScanner(
			self._snapshot,
			all_tests_disabled=disabled,
			parent_type_names=names,
		)
		member_scanner.walk(decl.members)

		if not member_scanner.result and suite_attribute is None:
			return VisitAction.SKIP_CHILDREN

		label = data.display_name if data is not None and data.display_name is not None else type_names[-1]
		self.result.append(
			TestItem(
				id="/".join(names),
				label=label,
				disabled=disabled,
				style=TestStyle.SWIFT_TESTING,
				location=self._location(decl),
				children=tuple(member_scanner.result),
				tags=tuple(TestTag(id=tag) for tag in data.tags) if data is not None else (),
			)
		)
		return VisitAction.SKIP_CHILDREN

	def _visit_function(self, decl: FunctionDecl) -> VisitAction:
		test_attribute = _first_attribute_named(decl, TEST_ATTRIBUTE)
		if test_attribute is None:
			return VisitAction.SKIP_CHILDREN
		data = TestingAttributeData.from_attribute(test_attribute)
		if data.is_hidden:
			logger.debug("skipping hidden test %s", decl.name)
			return VisitAction.SKIP_CHILDREN

		name = declared_test_name(decl)
		self.result.append(
			TestItem(
				id="/".join(self._parent_type_names + (name,)),
				label=data.display_name if data.display_name is not None else name,
				disabled=data.is_disabled or self._all_tests_disabled,
				style=TestStyle.SWIFT_TESTING,
				location=self._location(decl),
				tags=tuple(TestTag(id=tag) for tag in data.tags),
			)
		)
		# Local types declared in a test body can hold tests of their own.
		return VisitAction.VISIT_CHILDREN


def may_contain_tests(text: str) -> bool:
	"""
	Cheap textual check run before parsing.

	A swift-testing file must spell `@Suite` or `@Test`, possibly module
	qualified and with arbitrary whitespace, so only the bare names are
	searched for.
	"""
	return any(keyword in text for keyword in PREFILTER_KEYWORDS)


def scan_source_file(snapshot: DocumentSnapshot, tree: SourceFile) -> List[TestItem]:
	"""Walk an already parsed file; no pre-filtering."""
	scanner = SwiftTestingScanner(snapshot)
	scanner.walk(tree.items)
	return list(scanner.result)


def find_test_symbols(
	snapshot: DocumentSnapshot,
	syntax_tree_for: SyntaxTreeProvider = parse_snapshot,
) -> List[TestItem]:
	"""
	Discover the swift-testing tests of `snapshot`.

	Files that fail the keyword pre-filter are never parsed. A file the
	syntax tree provider cannot parse yields no tests.
	"""
	if not may_contain_tests(snapshot.text):
		logger.debug("%s: no Suite/Test keyword, not scanning", snapshot.uri)
		return []
	try:
		tree = syntax_tree_for(snapshot)
	except SwiftParseError as err:
		logger.warning("%s: cannot scan for tests: %s", snapshot.uri, err)
		return []
	return scan_source_file(snapshot, tree)


__all__ = [
	"SwiftTestingScanner",
	"VisitAction",
	"declared_test_name",
	"find_test_symbols",
	"may_contain_tests",
	"scan_source_file",
]

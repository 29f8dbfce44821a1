# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Qualified-name resolution and the canonical swift-testing names.

Nothing here resolves symbols. References are flattened into their written
name components, and a reference matches a canonical name when its dotted
spelling is one of that name's accepted spellings: bare, qualified by the
owning type, or qualified by module and type.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Sequence

from testscan.parser.ast import (
	Attribute,
	DeclReference,
	Expr,
	IdentifierType,
	MemberAccess,
	MemberType,
	TypeRef,
)

TESTING_MODULE = "Testing"

TEST_ATTRIBUTE = "Test"
SUITE_ATTRIBUTE = "Suite"

# A file that spells neither attribute name cannot contain swift-testing tests.
PREFILTER_KEYWORDS = (SUITE_ATTRIBUTE, TEST_ATTRIBUTE)

LEGACY_TEST_CASE_BASE = "XCTestCase"

CONDITION_LABEL = "if"


def _spellings(owner: str, name: str) -> FrozenSet[str]:
	return frozenset({name, f"{owner}.{name}", f"{TESTING_MODULE}.{owner}.{name}"})


TAG_LIST_CALLS = _spellings("Tag.List", "tags")
DISABLED_CALLS = _spellings("ConditionTrait", "disabled")
HIDDEN_TRAITS = _spellings("HiddenTrait", "hidden")

# Longest first: `Testing.Tag.foo` must lose both components.
TAG_NAMESPACE_PREFIXES = ((TESTING_MODULE, "Tag"), ("Tag",))


def member_access_components(expr: MemberAccess) -> List[str]:
	"""
	Name components of a member access, e.g. `x.y.z` -> ["x", "y", "z"].

	A base that is not itself a name (a call, a literal, the implicit base of
	`.z`) contributes nothing, so `f().z` and `.z` both yield ["z"].
	"""
	base = expr.base
	if isinstance(base, DeclReference):
		return [base.name, expr.name]
	if isinstance(base, MemberAccess):
		return member_access_components(base) + [expr.name]
	return [expr.name]


def qualified_name(expr: Expr) -> Optional[str]:
	"""Dotted name of a member-access expression; None for any other expression."""
	if not isinstance(expr, MemberAccess):
		return None
	return ".".join(member_access_components(expr))


def type_components(typ: TypeRef) -> Optional[List[str]]:
	"""
	Components of a simple identifier-chain type: `Foo.Bar` -> ["Foo", "Bar"].

	Generic arguments are ignored. Array, dictionary, optional and other type
	syntax yields None.
	"""
	if isinstance(typ, IdentifierType):
		return [typ.name]
	if isinstance(typ, MemberType):
		base = type_components(typ.base)
		if base is None:
			return None
		return base + [typ.name]
	return None


def attribute_is_named(attribute: Attribute, name: str, module: str = TESTING_MODULE) -> bool:
	"""True for `@name` and `@module.name`; the module part may not carry generic arguments."""
	typ = attribute.name
	if isinstance(typ, IdentifierType):
		return typ.name == name
	if isinstance(typ, MemberType) and isinstance(typ.base, IdentifierType) and not typ.base.has_generic_args:
		return typ.name == name and typ.base.name == module
	return False


def normalize_tag(components: Sequence[str]) -> str:
	"""Strip the tag namespace and render as `.name`: `Tag.Nested.foo` -> `.Nested.foo`."""
	parts = list(components)
	for prefix in TAG_NAMESPACE_PREFIXES:
		if tuple(parts[:len(prefix)]) == prefix:
			parts = parts[len(prefix):]
			break
	return "." + ".".join(parts)

from __future__ import annotations

import pytest

from testscan.parser import ast
from testscan.parser.parser import parse_source
from testscan.scanner import names


def _first_argument(text: str) -> ast.Expr:
	attribute = parse_source("@Test(" + text + ") func a() {}").items[0].attributes[0]
	return attribute.arguments[0].expr


@pytest.mark.parametrize(
	("text", "components"),
	[
		(".fast", ["fast"]),
		("Tag.fast", ["Tag", "fast"]),
		("Testing.Tag.fast", ["Testing", "Tag", "fast"]),
		("make().fast", ["fast"]),
	],
)
def test_member_access_components(text: str, components: list[str]) -> None:
	expr = _first_argument(text)
	assert isinstance(expr, ast.MemberAccess)
	assert names.member_access_components(expr) == components


def test_qualified_name_only_for_member_access() -> None:
	assert names.qualified_name(_first_argument("Tag.List.tags")) == "Tag.List.tags"
	assert names.qualified_name(_first_argument("hidden")) is None
	assert names.qualified_name(_first_argument(".tags(.a)")) is None


def test_trait_spellings() -> None:
	assert names.TAG_LIST_CALLS == {"tags", "Tag.List.tags", "Testing.Tag.List.tags"}
	assert names.DISABLED_CALLS == {"disabled", "ConditionTrait.disabled", "Testing.ConditionTrait.disabled"}
	assert names.HIDDEN_TRAITS == {"hidden", "HiddenTrait.hidden", "Testing.HiddenTrait.hidden"}


@pytest.mark.parametrize(
	("components", "tag"),
	[
		(["fast"], ".fast"),
		(["Tag", "fast"], ".fast"),
		(["Testing", "Tag", "fast"], ".fast"),
		(["Tag", "Nested", "fast"], ".Nested.fast"),
		(["Nested", "fast"], ".Nested.fast"),
		(["Testing", "fast"], ".Testing.fast"),
	],
)
def test_normalize_tag(components: list[str], tag: str) -> None:
	assert names.normalize_tag(components) == tag


@pytest.mark.parametrize(
	("source", "expected"),
	[
		("@Test func a() {}", True),
		("@Testing.Test func a() {}", True),
		("@Other.Test func a() {}", False),
		("@Testing<Int>.Test func a() {}", False),
		("@MainActor func a() {}", False),
		("@Suite func a() {}", False),
	],
)
def test_attribute_is_named(source: str, expected: bool) -> None:
	attribute = parse_source(source).items[0].attributes[0]
	assert names.attribute_is_named(attribute, names.TEST_ATTRIBUTE) is expected


@pytest.mark.parametrize(
	("header", "components"),
	[
		("Foo", ["Foo"]),
		("Foo.Bar", ["Foo", "Bar"]),
		("Array<Int>.Index", ["Array", "Index"]),
		("[Int]", None),
		("Foo?", None),
	],
)
def test_type_components(header: str, components: list[str] | None) -> None:
	decl = parse_source("extension " + header + " {}").items[0]
	assert names.type_components(decl.extended_type) == components

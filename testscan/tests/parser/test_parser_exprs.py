from __future__ import annotations

import pytest

from testscan.parser import ast
from testscan.parser.parser import parse_source


def _attribute(source: str) -> ast.Attribute:
	return parse_source(source).items[0].attributes[0]


def test_attribute_arguments_with_display_name_and_traits() -> None:
	attribute = _attribute('@Test("Adds numbers", .tags(.fast, Tag.slow), .disabled(if: flag)) func a() {}')
	args = attribute.arguments
	assert [arg.label for arg in args] == [None, None, None]

	name = args[0].expr
	assert isinstance(name, ast.StringLiteral)
	assert name.value == "Adds numbers"

	tags = args[1].expr
	assert isinstance(tags, ast.Call)
	assert isinstance(tags.callee, ast.MemberAccess)
	assert tags.callee.base is None
	assert tags.callee.name == "tags"
	fast, slow = [arg.expr for arg in tags.arguments]
	assert isinstance(fast, ast.MemberAccess) and fast.base is None and fast.name == "fast"
	assert isinstance(slow, ast.MemberAccess) and isinstance(slow.base, ast.DeclReference)
	assert slow.base.name == "Tag"

	disabled = args[2].expr
	assert isinstance(disabled, ast.Call)
	assert [arg.label for arg in disabled.arguments] == ["if"]
	assert disabled.trailing_closure is None


def test_labeled_collection_argument_is_opaque() -> None:
	attribute = _attribute("@Test(arguments: [1, 2, 3]) func a(value: Int) {}")
	(arg,) = attribute.arguments
	assert arg.label == "arguments"
	assert isinstance(arg.expr, ast.OtherExpr)


def test_operator_expression_is_opaque() -> None:
	attribute = _attribute("@Test(.timeLimit(.minutes(1)), x + 1) func a() {}")
	first, second = [arg.expr for arg in attribute.arguments]
	assert isinstance(first, ast.Call)
	assert isinstance(second, ast.OtherExpr)


def test_trailing_closure_without_arguments() -> None:
	attribute = _attribute("@Test(.disabled { isCI }) func a() {}")
	call = attribute.arguments[0].expr
	assert isinstance(call, ast.Call)
	assert isinstance(call.callee, ast.MemberAccess)
	assert call.callee.name == "disabled"
	assert call.arguments == []
	assert isinstance(call.trailing_closure, ast.Closure)


def test_trailing_closure_after_arguments() -> None:
	attribute = _attribute('@Test(.disabled("flaky") { isCI }) func a() {}')
	call = attribute.arguments[0].expr
	assert isinstance(call, ast.Call)
	assert call.callee.name == "disabled"
	assert len(call.arguments) == 1
	assert call.trailing_closure is not None


def test_member_chain_on_call_result() -> None:
	attribute = _attribute("@Test(make().hidden) func a() {}")
	expr = attribute.arguments[0].expr
	assert isinstance(expr, ast.MemberAccess)
	assert expr.name == "hidden"
	assert isinstance(expr.base, ast.Call)


@pytest.mark.parametrize(
	("literal", "value"),
	[
		('"plain"', "plain"),
		('""', ""),
		('"a\\tb"', "a\tb"),
		('"say \\"hi\\""', 'say "hi"'),
		('"\\u{1F600} face"', "\U0001F600 face"),
		('#"raw \\n"#', "raw \\n"),
		('#"raw \\#n"#', "raw \n"),
		('#"not \\(interpolated)"#', "not \\(interpolated)"),
		('"\\(count) items"', None),
		('#"\\#(count) items"#', None),
	],
)
def test_string_literal_value(literal: str, value: str | None) -> None:
	attribute = _attribute("@Test(" + literal + ") func a() {}")
	expr = attribute.arguments[0].expr
	assert isinstance(expr, ast.StringLiteral)
	assert expr.raw == literal
	assert expr.value == value


def test_multiline_string_literal_strips_closing_indent() -> None:
	attribute = _attribute('@Test("""\n  Multi\n    line\n  """) func a() {}')
	expr = attribute.arguments[0].expr
	assert isinstance(expr, ast.StringLiteral)
	assert expr.value == "Multi\n  line"

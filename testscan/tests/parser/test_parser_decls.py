from __future__ import annotations

import pytest

from testscan.parser import ast
from testscan.parser.parser import SwiftParseError, parse_source


def test_struct_members_and_function_params() -> None:
	source = """
struct S {
	@Test func a(_ x: Int, y z: String) {}
	func helper() {}
}
"""
	tree = parse_source(source)
	assert len(tree.items) == 1
	struct = tree.items[0]
	assert isinstance(struct, ast.TypeDecl)
	assert struct.kind == "struct"
	assert struct.name == "S"
	assert [member.name for member in struct.members] == ["a", "helper"]
	test_fn = struct.members[0]
	assert [(p.first_name, p.second_name) for p in test_fn.params] == [("_", "x"), ("y", "z")]
	assert test_fn.body == []
	assert len(test_fn.attributes) == 1
	assert struct.members[1].attributes == []


def test_generic_params_keep_commas_together() -> None:
	tree = parse_source("func f<T, U>(pair: Dictionary<T, U>, other: Int) -> Int where T: Hashable { 0 }")
	fn = tree.items[0]
	assert isinstance(fn, ast.FunctionDecl)
	assert fn.name == "f"
	assert [p.first_name for p in fn.params] == ["pair", "other"]


def test_decl_range_starts_at_first_attribute_and_skips_comments() -> None:
	source = "/// Adds numbers.\n@Test func a() {}\n// trailing\n"
	fn = parse_source(source).items[0]
	assert source[fn.loc.start:fn.loc.end] == "@Test func a() {}"


def test_decl_range_includes_modifiers() -> None:
	source = "@MainActor public final class C: XCTestCase, Sendable {}"
	decl = parse_source(source).items[0]
	assert isinstance(decl, ast.TypeDecl)
	assert decl.kind == "class"
	assert decl.modifiers == ["public", "final"]
	assert source[decl.loc.start:decl.loc.end] == source
	assert [typ.name for typ in decl.inherited] == ["XCTestCase", "Sendable"]


def test_class_func_modifier_is_not_a_type() -> None:
	tree = parse_source("struct S { class func make() {} private(set) var x = 1 }")
	struct = tree.items[0]
	assert len(struct.members) == 1
	fn = struct.members[0]
	assert isinstance(fn, ast.FunctionDecl)
	assert fn.modifiers == ["class"]


def test_generic_type_inheritance() -> None:
	decl = parse_source("struct Box<T>: Equatable where T: Equatable {}").items[0]
	assert len(decl.inherited) == 1
	assert isinstance(decl.inherited[0], ast.IdentifierType)
	assert decl.inherited[0].name == "Equatable"


def test_extension_of_member_type_with_conformance() -> None:
	decl = parse_source("extension Foo.Bar: P where T: Q {\n    func f() {}\n}").items[0]
	assert isinstance(decl, ast.ExtensionDecl)
	extended = decl.extended_type
	assert isinstance(extended, ast.MemberType)
	assert extended.name == "Bar"
	assert isinstance(extended.base, ast.IdentifierType)
	assert extended.base.name == "Foo"
	assert [typ.name for typ in decl.inherited] == ["P"]
	assert [member.name for member in decl.members] == ["f"]


@pytest.mark.parametrize("header", ["[Int]", "Int?", "(Int, Int)"])
def test_extension_of_non_nominal_type(header: str) -> None:
	decl = parse_source("extension " + header + " {}").items[0]
	assert isinstance(decl, ast.ExtensionDecl)
	assert isinstance(decl.extended_type, ast.OtherType)


def test_qualified_attribute_name() -> None:
	decl = parse_source("@Testing.Suite\nstruct S {}").items[0]
	attribute = decl.attributes[0]
	assert attribute.arguments is None
	assert isinstance(attribute.name, ast.MemberType)
	assert attribute.name.name == "Suite"
	assert attribute.name.base.name == "Testing"


def test_attribute_arguments_only_bind_on_same_line() -> None:
	tree = parse_source("@Suite\n(x) struct S {}")
	# The parenthesized expression on the next line is not an argument list.
	decl = tree.items[0]
	assert decl.name == "S"
	assert decl.attributes == []


def test_nested_declarations_in_bodies_and_blocks() -> None:
	source = """
func f() {
	struct Local {}
}
let x = {
	struct InClosure {}
}
"""
	tree = parse_source(source)
	fn, block = tree.items
	assert isinstance(fn, ast.FunctionDecl)
	assert [item.name for item in fn.body] == ["Local"]
	assert isinstance(block, ast.CodeBlock)
	assert [item.name for item in block.items] == ["InClosure"]


def test_conditional_compilation_directives_are_skipped() -> None:
	tree = parse_source("#if DEBUG\n@Test func a() {}\n#else\nfunc b() {}\n#endif\n")
	assert [item.name for item in tree.items] == ["a", "b"]
	assert len(tree.items[0].attributes) == 1


def test_protocol_requirement_without_body() -> None:
	decl = parse_source("protocol P {\n    func a()\n    func b() async throws\n}").items[0]
	assert decl.kind == "protocol"
	assert [member.name for member in decl.members] == ["a", "b"]
	assert all(member.body is None for member in decl.members)


def test_unbalanced_brace_is_a_parse_error() -> None:
	with pytest.raises(SwiftParseError) as excinfo:
		parse_source("struct S {")
	assert "unbalanced" in str(excinfo.value)


def test_stray_closing_paren_reports_position() -> None:
	with pytest.raises(SwiftParseError) as excinfo:
		parse_source("func a() ) {}")
	assert excinfo.value.line == 1
	assert excinfo.value.column == 10


def test_unterminated_string_literal() -> None:
	with pytest.raises(SwiftParseError) as excinfo:
		parse_source('let s = "abc\n')
	assert str(excinfo.value) == "unterminated string literal"


def test_empty_source() -> None:
	tree = parse_source("")
	assert tree.items == []


def test_attribute_in_return_type_stays_in_signature() -> None:
	source = "@Test func a() -> @Sendable () -> Void {\n\treturn {}\n}"
	tree = parse_source(source)
	assert len(tree.items) == 1
	fn = tree.items[0]
	assert isinstance(fn, ast.FunctionDecl)
	assert fn.body == []
	assert source[fn.loc.start:fn.loc.end] == source


def test_attribute_of_next_member_ends_signature() -> None:
	decl = parse_source("protocol P {\n\tfunc a() -> Int\n\t@MainActor func b()\n}").items[0]
	a, b = decl.members
	assert a.body is None
	assert [attr.name.name for attr in b.attributes] == ["MainActor"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Swift declaration reader.

The lark grammar only lexes Swift and balances `()`, `[]` and `{}`. This module
walks the resulting token tree group by group and recognizes the declaration
shapes the test scanner works with. Code it does not understand is skipped,
except that its braced regions are still searched for nested declarations.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from .ast import (
	Argument,
	Attribute,
	Call,
	Closure,
	CodeBlock,
	DeclReference,
	Expr,
	ExtensionDecl,
	FunctionDecl,
	IdentifierType,
	Item,
	Located,
	MemberAccess,
	MemberType,
	OtherExpr,
	OtherType,
	Param,
	SourceFile,
	StringLiteral,
	TypeDecl,
	TypeRef,
)
from .lexer import SwiftLexer, UnterminatedLiteral

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer=SwiftLexer,
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

Node = Union[Token, Tree]

_TYPE_KEYWORDS = frozenset({"struct", "class", "enum", "actor", "protocol"})

_DECL_KEYWORDS = _TYPE_KEYWORDS | frozenset(
	{
		"extension",
		"func",
		"init",
		"deinit",
		"subscript",
		"var",
		"let",
		"typealias",
		"associatedtype",
		"import",
		"case",
		"operator",
		"precedencegroup",
		"macro",
	}
)

_MODIFIERS = frozenset(
	{
		"public",
		"private",
		"fileprivate",
		"internal",
		"package",
		"open",
		"static",
		"final",
		"override",
		"mutating",
		"nonmutating",
		"nonisolated",
		"isolated",
		"distributed",
		"convenience",
		"required",
		"lazy",
		"weak",
		"unowned",
		"dynamic",
		"optional",
		"indirect",
		"prefix",
		"postfix",
		"infix",
		"consuming",
		"borrowing",
	}
)

_SIMPLE_ESCAPES = {
	"0": "\0",
	"\\": "\\",
	"t": "\t",
	"n": "\n",
	"r": "\r",
	'"': '"',
	"'": "'",
}

_STRING_PARTS = re.compile(r'^(#*)("""|")(.*)\2\1$', re.S)
_HEX_SCALAR = re.compile(r"[0-9A-Fa-f]{1,8}")


class SwiftParseError(ValueError):
	"""
	Source text the reader cannot turn into a token tree.

	Only lexical problems and unbalanced brackets end up here; declarations
	with unexpected shapes are read on a best-effort basis instead. `line` and
	`column` are 1-based when known.
	"""

	def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
		super().__init__(message)
		self.line = line
		self.column = column


def parse_source(source: str) -> SourceFile:
	"""Parse Swift source text into a `SourceFile`, raising `SwiftParseError` on malformed input."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise SwiftParseError(
			_error_message(err),
			line=_int_or_none(getattr(err, "line", None)),
			column=_int_or_none(getattr(err, "column", None)),
		) from err
	return SourceFile(loc=Located(0, len(source)), items=_build_items(tree.children))


def _error_message(err: UnexpectedInput) -> str:
	if isinstance(err, UnterminatedLiteral):
		return f"unterminated {err.kind}"
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character {err.char!r}"
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return "unexpected end of file: unbalanced bracket"
		return f"unexpected {err.token.value!r}: unbalanced bracket"
	return str(err)


def _int_or_none(value: object) -> Optional[int]:
	return value if isinstance(value, int) else None


# --- token tree helpers -------------------------------------------------------


def _name(node: Node) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	return node.type


def _is_token(node: Optional[Node], type_: str, value: Optional[str] = None) -> bool:
	return isinstance(node, Token) and node.type == type_ and (value is None or node.value == value)


def _is_group(node: Optional[Node], kind: str) -> bool:
	return isinstance(node, Tree) and _name(node) == kind


def _inner(group: Tree) -> List[Node]:
	return group.children[1:-1]


def _start(node: Node) -> int:
	if isinstance(node, Tree):
		return node.children[0].start_pos
	return node.start_pos


def _end(node: Node) -> int:
	if isinstance(node, Tree):
		return node.children[-1].end_pos
	return node.end_pos


def _same_line(before: Node, after: Node) -> bool:
	last = before.children[-1] if isinstance(before, Tree) else before
	first = after.children[0] if isinstance(after, Tree) else after
	return last.end_line == first.line


def _span(nodes: Sequence[Node]) -> Located:
	return Located(_start(nodes[0]), _end(nodes[-1]))


def _at(nodes: Sequence[Node], idx: int) -> Optional[Node]:
	return nodes[idx] if 0 <= idx < len(nodes) else None


def _after_dot(nodes: Sequence[Node], idx: int) -> bool:
	return _is_token(_at(nodes, idx - 1), "DOT")


def _angle_delta(operator: str) -> int:
	operator = operator.replace("->", "")
	return operator.count("<") - operator.count(">")


def _opens_angle(node: Optional[Node]) -> bool:
	return _is_token(node, "OPERATOR") and node.value.startswith("<")


def _skip_angles(nodes: Sequence[Node], idx: int) -> int:
	"""Skip the generic clause opening at `nodes[idx]`; returns the index after it."""
	depth = 0
	while idx < len(nodes):
		node = nodes[idx]
		if _is_token(node, "OPERATOR"):
			depth += _angle_delta(node.value)
		idx += 1
		if depth <= 0:
			break
	return idx


def _split_commas(nodes: Sequence[Node], *, angles: bool) -> List[List[Node]]:
	"""
	Split a group's contents on top-level commas.

	Nested brackets are already separate trees. With `angles`, commas inside
	`<...>` generic argument lists are kept together as well.
	"""
	chunks: List[List[Node]] = [[]]
	depth = 0
	for node in nodes:
		if angles and _is_token(node, "OPERATOR"):
			depth = max(0, depth + _angle_delta(node.value))
		if depth == 0 and _is_token(node, "COMMA"):
			chunks.append([])
			continue
		chunks[-1].append(node)
	return [chunk for chunk in chunks if chunk]


# --- declarations -------------------------------------------------------------


def _is_attribute_start(nodes: Sequence[Node], idx: int) -> bool:
	return _is_token(nodes[idx], "AT") and _is_token(_at(nodes, idx + 1), "NAME")


def _is_modifier(nodes: Sequence[Node], idx: int) -> bool:
	node = nodes[idx]
	if not _is_token(node, "NAME") or _after_dot(nodes, idx):
		return False
	if node.value in _MODIFIERS:
		return True
	if node.value == "class":
		nxt = _at(nodes, idx + 1)
		return _is_token(nxt, "NAME") and (nxt.value in _DECL_KEYWORDS or nxt.value in _MODIFIERS)
	return False


def _build_items(nodes: Sequence[Node]) -> List[Item]:
	"""
	Read one scope (file, member block, body) into declaration items.

	Attributes and modifiers are buffered until the declaration they belong
	to; any other token discards them. Unrecognized groups are searched for
	nested declarations and kept as `CodeBlock`s when they contain any.
	"""
	items: List[Item] = []
	attributes: List[Attribute] = []
	modifiers: List[str] = []
	decl_start: Optional[int] = None
	idx = 0
	while idx < len(nodes):
		node = nodes[idx]
		if _is_attribute_start(nodes, idx):
			attribute, idx = _build_attribute(nodes, idx)
			attributes.append(attribute)
			if decl_start is None:
				decl_start = attribute.loc.start
			continue
		if _is_modifier(nodes, idx):
			if decl_start is None:
				decl_start = node.start_pos
			modifiers.append(node.value)
			idx += 1
			# detail such as `private(set)` or `unowned(safe)`
			if _is_group(_at(nodes, idx), "paren") and _same_line(node, nodes[idx]):
				idx += 1
			continue
		start = decl_start if decl_start is not None else _start(node)
		decl, next_idx = _build_decl(nodes, idx, attributes, modifiers, start)
		if decl is not None:
			items.append(decl)
			idx = next_idx
		else:
			if isinstance(node, Tree):
				nested = _build_items(_inner(node))
				if nested:
					items.append(CodeBlock(loc=Located(_start(node), _end(node)), items=nested))
			idx += 1
		attributes = []
		modifiers = []
		decl_start = None
	return items


def _build_decl(
	nodes: Sequence[Node],
	idx: int,
	attributes: List[Attribute],
	modifiers: List[str],
	start: int,
) -> Tuple[Optional[Item], int]:
	node = nodes[idx]
	if not _is_token(node, "NAME") or _after_dot(nodes, idx):
		return None, idx
	nxt = _at(nodes, idx + 1)
	if node.value in _TYPE_KEYWORDS and _is_token(nxt, "NAME"):
		return _build_type_decl(nodes, idx, attributes, modifiers, start)
	if node.value == "extension" and nxt is not None and not _is_group(nxt, "brace"):
		return _build_extension_decl(nodes, idx, attributes, modifiers, start)
	if node.value == "func" and (_is_token(nxt, "NAME") or _is_token(nxt, "OPERATOR")):
		return _build_function_decl(nodes, idx, attributes, modifiers, start)
	return None, idx


def _ends_header(nodes: Sequence[Node], idx: int, *, signature: bool) -> bool:
	node = nodes[idx]
	if _is_token(node, "SEMI") or _is_token(node, "POUND"):
		return True
	if _is_token(node, "NAME") and node.value in _DECL_KEYWORDS and not _after_dot(nodes, idx):
		return True
	# A type header may hold `@unchecked Sendable`; a function signature ends
	# where the next declaration's attributes or modifiers begin.
	if not signature:
		return False
	return _is_modifier(nodes, idx) or (_is_attribute_start(nodes, idx) and _attributes_precede_decl(nodes, idx))


def _attributes_precede_decl(nodes: Sequence[Node], idx: int) -> bool:
	"""True when the attributes at `idx` are followed by a declaration keyword or modifier, not a type."""
	while idx < len(nodes) and _is_attribute_start(nodes, idx):
		_attribute, idx = _build_attribute(nodes, idx)
	node = _at(nodes, idx)
	if not _is_token(node, "NAME"):
		return False
	return node.value in _DECL_KEYWORDS or _is_modifier(nodes, idx)


def _read_header(
	nodes: Sequence[Node],
	idx: int,
	*,
	signature: bool,
) -> Tuple[List[Node], Optional[Tree], int]:
	"""Collect header tokens up to the declaration's body; returns (header, body, next index)."""
	header: List[Node] = []
	while idx < len(nodes):
		node = nodes[idx]
		if _is_group(node, "brace"):
			return header, node, idx + 1
		if _ends_header(nodes, idx, signature=signature):
			break
		header.append(node)
		idx += 1
	return header, None, idx


def _decl_end(body: Optional[Tree], header: Sequence[Node], fallback: Node) -> int:
	if body is not None:
		return _end(body)
	if header:
		return _end(header[-1])
	return _end(fallback)


def _build_type_decl(nodes, idx, attributes, modifiers, start) -> Tuple[TypeDecl, int]:
	keyword = nodes[idx]
	name_token = nodes[idx + 1]
	header, body, idx = _read_header(nodes, idx + 2, signature=False)
	decl = TypeDecl(
		loc=Located(start, _decl_end(body, header, name_token)),
		kind=keyword.value,
		name=name_token.value,
		inherited=_build_inheritance(header),
		members=_build_items(_inner(body)) if body is not None else [],
		attributes=list(attributes),
		modifiers=list(modifiers),
	)
	return decl, idx


def _build_extension_decl(nodes, idx, attributes, modifiers, start) -> Tuple[ExtensionDecl, int]:
	keyword = nodes[idx]
	header, body, idx = _read_header(nodes, idx + 1, signature=False)
	type_end = len(header)
	depth = 0
	for pos, node in enumerate(header):
		if _is_token(node, "OPERATOR"):
			depth += _angle_delta(node.value)
		elif depth <= 0 and (_is_token(node, "COLON") or _is_token(node, "NAME", "where")):
			type_end = pos
			break
	if type_end:
		extended_type = _build_type(header[:type_end])
	else:
		extended_type = OtherType(loc=Located(keyword.end_pos, keyword.end_pos))
	decl = ExtensionDecl(
		loc=Located(start, _decl_end(body, header, keyword)),
		extended_type=extended_type,
		inherited=_build_inheritance(header[type_end:]),
		members=_build_items(_inner(body)) if body is not None else [],
		attributes=list(attributes),
		modifiers=list(modifiers),
	)
	return decl, idx


def _build_function_decl(nodes, idx, attributes, modifiers, start) -> Tuple[FunctionDecl, int]:
	name_token = nodes[idx + 1]
	idx += 2
	if _opens_angle(_at(nodes, idx)):
		idx = _skip_angles(nodes, idx)
	params: List[Param] = []
	last: Node = name_token
	if _is_group(_at(nodes, idx), "paren"):
		params = _build_params(_inner(nodes[idx]))
		last = nodes[idx]
		idx += 1
	header, body, idx = _read_header(nodes, idx, signature=True)
	decl = FunctionDecl(
		loc=Located(start, _decl_end(body, header, last)),
		name=name_token.value,
		params=params,
		body=_build_items(_inner(body)) if body is not None else None,
		attributes=list(attributes),
		modifiers=list(modifiers),
	)
	return decl, idx


def _build_params(nodes: Sequence[Node]) -> List[Param]:
	params: List[Param] = []
	for chunk in _split_commas(nodes, angles=True):
		first = chunk[0]
		first_name = first.value if _is_token(first, "NAME") else ""
		second = _at(chunk, 1)
		second_name = second.value if _is_token(second, "NAME") else None
		params.append(Param(first_name=first_name, second_name=second_name))
	return params


def _build_inheritance(header: Sequence[Node]) -> List[TypeRef]:
	idx = 0
	if _opens_angle(_at(header, idx)):
		idx = _skip_angles(header, idx)
	if not _is_token(_at(header, idx), "COLON"):
		return []
	clause: List[Node] = []
	for node in header[idx + 1:]:
		if _is_token(node, "NAME", "where"):
			break
		clause.append(node)
	return [_build_type(chunk) for chunk in _split_commas(clause, angles=True)]


def _build_type(nodes: Sequence[Node]) -> TypeRef:
	"""Read `A.B<C>.D`-style identifier chains; anything else becomes `OtherType`."""
	loc = _span(nodes)
	typ: Optional[TypeRef] = None
	idx = 0
	while True:
		name_token = _at(nodes, idx)
		if not _is_token(name_token, "NAME"):
			return OtherType(loc=loc)
		idx += 1
		generic = _opens_angle(_at(nodes, idx))
		if generic:
			idx = _skip_angles(nodes, idx)
		part_loc = Located(loc.start, _end(nodes[idx - 1]))
		if typ is None:
			typ = IdentifierType(loc=part_loc, name=name_token.value, has_generic_args=generic)
		else:
			typ = MemberType(loc=part_loc, base=typ, name=name_token.value, has_generic_args=generic)
		if idx == len(nodes):
			return typ
		if not _is_token(nodes[idx], "DOT"):
			return OtherType(loc=loc)
		idx += 1


# --- attributes and expressions -----------------------------------------------


def _build_attribute(nodes: Sequence[Node], idx: int) -> Tuple[Attribute, int]:
	at = nodes[idx]
	idx += 1
	name: Optional[TypeRef] = None
	last: Node = at
	while True:
		name_token = nodes[idx]
		idx += 1
		last = name_token
		generic = False
		if _opens_angle(_at(nodes, idx)) and nodes[idx].start_pos == last.end_pos:
			idx = _skip_angles(nodes, idx)
			last = nodes[idx - 1]
			generic = True
		part_loc = Located(name_token.start_pos if name is None else name.loc.start, _end(last))
		if name is None:
			name = IdentifierType(loc=part_loc, name=name_token.value, has_generic_args=generic)
		else:
			name = MemberType(loc=part_loc, base=name, name=name_token.value, has_generic_args=generic)
		dot = _at(nodes, idx)
		if _is_token(dot, "DOT") and _is_token(_at(nodes, idx + 1), "NAME") and dot.start_pos == _end(last):
			idx += 1
			continue
		break
	arguments: Optional[List[Argument]] = None
	group = _at(nodes, idx)
	if _is_group(group, "paren") and _same_line(last, group):
		arguments = _build_arguments(_inner(group))
		last = group
		idx += 1
	return Attribute(loc=Located(at.start_pos, _end(last)), name=name, arguments=arguments), idx


def _build_arguments(nodes: Sequence[Node]) -> List[Argument]:
	arguments: List[Argument] = []
	for chunk in _split_commas(nodes, angles=False):
		label: Optional[str] = None
		value_nodes = chunk
		if len(chunk) >= 2 and _is_token(chunk[0], "NAME") and _is_token(chunk[1], "COLON"):
			label = chunk[0].value
			value_nodes = chunk[2:]
		if value_nodes:
			expr = _build_expr(value_nodes)
		else:
			expr = OtherExpr(loc=Located(_end(chunk[-1]), _end(chunk[-1])))
		arguments.append(Argument(loc=_span(chunk), label=label, expr=expr))
	return arguments


def _build_closure(group: Tree) -> Closure:
	return Closure(loc=Located(_start(group), _end(group)), items=_build_items(_inner(group)))


def _build_primary(nodes: Sequence[Node], idx: int) -> Tuple[Optional[Expr], int]:
	node = nodes[idx]
	if _is_token(node, "STRING"):
		loc = Located(node.start_pos, node.end_pos)
		return StringLiteral(loc=loc, raw=node.value, value=_string_literal_value(node.value)), idx + 1
	if _is_token(node, "NAME"):
		return DeclReference(loc=Located(node.start_pos, node.end_pos), name=node.value), idx + 1
	name_token = _at(nodes, idx + 1)
	if _is_token(node, "DOT") and _is_token(name_token, "NAME"):
		loc = Located(node.start_pos, name_token.end_pos)
		return MemberAccess(loc=loc, base=None, name=name_token.value), idx + 2
	if _is_group(node, "brace"):
		return _build_closure(node), idx + 1
	return None, idx


def _build_expr(nodes: Sequence[Node]) -> Expr:
	"""
	Read a postfix expression: a primary followed by `.member`, call and
	trailing-closure suffixes. Calls and trailing closures only bind on the
	same line. Operators or any other leftover tokens yield `OtherExpr`.
	"""
	loc = _span(nodes)
	expr, idx = _build_primary(nodes, 0)
	if expr is None:
		return OtherExpr(loc=loc)
	while idx < len(nodes):
		node = nodes[idx]
		prev = nodes[idx - 1]
		name_token = _at(nodes, idx + 1)
		if _is_token(node, "DOT") and _is_token(name_token, "NAME"):
			expr = MemberAccess(loc=Located(expr.loc.start, name_token.end_pos), base=expr, name=name_token.value)
			idx += 2
		elif _is_group(node, "paren") and _same_line(prev, node):
			expr = Call(
				loc=Located(expr.loc.start, _end(node)),
				callee=expr,
				arguments=_build_arguments(_inner(node)),
			)
			idx += 1
		elif _is_group(node, "brace") and _same_line(prev, node):
			closure = _build_closure(node)
			if isinstance(expr, Call) and expr.trailing_closure is None:
				expr = Call(loc=Located(expr.loc.start, _end(node)), callee=expr.callee, arguments=expr.arguments, trailing_closure=closure)
			else:
				expr = Call(loc=Located(expr.loc.start, _end(node)), callee=expr, arguments=[], trailing_closure=closure)
			idx += 1
		else:
			return OtherExpr(loc=loc)
	return expr


# --- string literals ----------------------------------------------------------


def _string_literal_value(raw: str) -> Optional[str]:
	"""
	Represented value of a string literal token, or None when it contains
	interpolation. Raw delimiters (`#"..."#`) move the escape marker to `\\#`.
	"""
	match = _STRING_PARTS.match(raw)
	if match is None:
		return None
	pounds, quote, body = match.groups()
	escape = "\\" + pounds
	if escape + "(" in body:
		return None
	if quote == '"""':
		body = _strip_multiline_indent(body)
	return _decode_escapes(body, escape)


def _strip_multiline_indent(body: str) -> str:
	lines = body.replace("\r\n", "\n").split("\n")
	if len(lines) < 2:
		return body
	# The first line ends the opening delimiter; the last one is the closing
	# delimiter's indentation, which every content line shares.
	indent = lines[-1]
	if indent.strip():
		return body
	content = [line[len(indent):] if line.startswith(indent) else line.lstrip(" \t") for line in lines[1:-1]]
	return "\n".join(content)


def _decode_escapes(body: str, escape: str) -> str:
	out: List[str] = []
	idx = 0
	while idx < len(body):
		if body.startswith(escape, idx):
			pos = idx + len(escape)
			char = body[pos:pos + 1]
			if char and char in _SIMPLE_ESCAPES:
				out.append(_SIMPLE_ESCAPES[char])
				idx = pos + 1
				continue
			if char == "\n":
				idx = pos + 1
				continue
			if char == "u" and body[pos + 1:pos + 2] == "{":
				close = body.find("}", pos + 2)
				digits = body[pos + 2:close] if close != -1 else ""
				if _HEX_SCALAR.fullmatch(digits) and int(digits, 16) <= 0x10FFFF:
					out.append(chr(int(digits, 16)))
					idx = close + 1
					continue
		out.append(body[idx])
		idx += 1
	return "".join(out)


__all__ = ["SwiftParseError", "parse_source"]

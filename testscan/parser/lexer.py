# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Swift lexer plugged into lark as a custom lexer class.

Plain tokens come from the terminals in grammar.lark, matched in priority
order. String and regex literals are scanned by hand because their extent
depends on context a regular terminal cannot see: the pound count of raw
delimiters, nested string literals inside `\\(...)` interpolations, and
whether a `/` sits where an operand may start.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lark import Token
from lark.exceptions import UnexpectedCharacters
from lark.lexer import Lexer

STRING = "STRING"
REGEX = "REGEX"

_STRING_OPEN = re.compile(r'#*"')
_EXTENDED_REGEX_OPEN = re.compile(r"(#+)/")

# Tokens after which `/` is a division operator rather than a regex literal.
_OPERAND_END = frozenset({"NAME", "NUMBER", STRING, REGEX, "RPAR", "RSQB", "RBRACE"})

# Keywords that still leave the parser expecting an operand.
_PREFIX_KEYWORDS = frozenset(
	{
		"return",
		"throw",
		"try",
		"await",
		"in",
		"case",
		"where",
		"if",
		"guard",
		"while",
		"switch",
		"else",
		"is",
		"as",
	}
)


class UnterminatedLiteral(UnexpectedCharacters):
	"""A string or regex literal without its closing delimiter; `kind` names which."""

	def __init__(self, text: str, pos: int, line: int, column: int, kind: str) -> None:
		super().__init__(text, pos, line, column)
		self.kind = kind


def _string_end(text: str, pos: int) -> Optional[int]:
	"""
	Offset just past the string literal opening at `pos`, or None when it is
	unterminated. Handles `"..."`, `\"\"\"...\"\"\"` and any number of raw
	`#` delimiters; the closing quote must carry the same pound count.
	"""
	start = pos
	while text.startswith("#", pos):
		pos += 1
	pounds = "#" * (pos - start)
	multiline = text.startswith('"""', pos)
	quote = '"""' if multiline else '"'
	pos += len(quote)
	close = quote + pounds
	escape = "\\" + pounds
	while pos < len(text):
		if text.startswith(close, pos):
			return pos + len(close)
		if text.startswith(escape, pos):
			pos += len(escape)
			if text.startswith("(", pos):
				end = _interpolation_end(text, pos + 1)
				if end is None:
					return None
				pos = end
			else:
				pos += 1
			continue
		if text[pos] == "\n" and not multiline:
			return None
		pos += 1
	return None


def _interpolation_end(text: str, pos: int) -> Optional[int]:
	"""Offset past the `)` closing an interpolation whose body starts at `pos`."""
	depth = 1
	while pos < len(text):
		char = text[pos]
		if _STRING_OPEN.match(text, pos):
			end = _string_end(text, pos)
			if end is None:
				return None
			pos = end
			continue
		if char == "(":
			depth += 1
		elif char == ")":
			depth -= 1
			if depth == 0:
				return pos + 1
		pos += 1
	return None


def _extended_regex_end(text: str, pos: int, pounds: str) -> Optional[int]:
	"""`pos` is just after the opening `#/`; the literal closes at `/` plus the same pounds."""
	close = "/" + pounds
	while pos < len(text):
		if text.startswith(close, pos):
			return pos + len(close)
		pos += 2 if text[pos] == "\\" else 1
	return None


def _bare_regex_end(text: str, pos: int) -> Optional[int]:
	"""
	Offset past a `/.../` literal starting at `pos`, or None when the slash
	cannot open one: the literal may not start or end with a space and must
	close on the same line. `/` inside a `[...]` character class does not close it.
	"""
	first = text[pos + 1:pos + 2]
	if not first or first.isspace() or first in "/*":
		return None
	idx = pos + 1
	classes = 0
	while idx < len(text):
		char = text[idx]
		if char == "\n":
			return None
		if char == "\\":
			idx += 2
			continue
		if char == "[":
			classes += 1
		elif char == "]" and classes:
			classes -= 1
		elif char == "/" and not classes:
			if text[idx - 1] in " \t":
				return None
			return idx + 1
		idx += 1
	return None


def _operand_may_start(last: Optional[Token]) -> bool:
	if last is None or last.type not in _OPERAND_END:
		return True
	return last.type == "NAME" and last.value in _PREFIX_KEYWORDS


class SwiftLexer(Lexer):
	"""
	Lexer class handed to `Lark(lexer=...)`.

	Lark instantiates it with the compiled `LexerConf`; tokens carry full
	position information so `propagate_positions` and error locations work as
	with lark's built-in lexers.
	"""

	def __init__(self, lexer_conf) -> None:
		terminals = sorted(lexer_conf.terminals, key=lambda term: (-term.priority, term.name))
		self._ignore = frozenset(lexer_conf.ignore)
		self._pattern = re.compile(
			"|".join(f"(?P<{term.name}>{term.pattern.to_regexp()})" for term in terminals),
			lexer_conf.g_regex_flags,
		)

	def lex(self, text: str) -> Iterator[Token]:
		pos = 0
		line = 1
		line_start = 0
		last: Optional[Token] = None
		while pos < len(text):
			column = pos - line_start + 1
			type_, end = self._literal_at(text, pos, last, line, column)
			if type_ is None:
				match = self._pattern.match(text, pos)
				if match is None or match.end() == pos:
					raise UnexpectedCharacters(text, pos, line, column)
				type_, end = match.lastgroup, match.end()
			value = text[pos:end]
			newlines = value.count("\n")
			if newlines:
				line += newlines
				line_start = pos + value.rindex("\n") + 1
			if type_ not in self._ignore:
				last = Token(
					type_,
					value,
					start_pos=pos,
					line=line - newlines,
					column=column,
					end_line=line,
					end_column=end - line_start + 1,
					end_pos=end,
				)
				yield last
			pos = end

	def _literal_at(self, text: str, pos: int, last: Optional[Token], line: int, column: int):
		"""(token type, end offset) of a string or regex literal at `pos`, or (None, pos)."""
		if _STRING_OPEN.match(text, pos):
			end = _string_end(text, pos)
			if end is None:
				raise UnterminatedLiteral(text, pos, line, column, "string literal")
			return STRING, end
		extended = _EXTENDED_REGEX_OPEN.match(text, pos)
		if extended:
			end = _extended_regex_end(text, extended.end(), extended.group(1))
			if end is None:
				raise UnterminatedLiteral(text, pos, line, column, "regex literal")
			return REGEX, end
		if text.startswith("/", pos) and _operand_may_start(last):
			end = _bare_regex_end(text, pos)
			if end is not None:
				return REGEX, end
		return None, pos


__all__ = ["SwiftLexer", "UnterminatedLiteral"]

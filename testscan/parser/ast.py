# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree produced by the Swift declaration reader.

Only the shapes the test scanner inspects get a dedicated node: attributes and
their argument expressions, nominal type / extension / function declarations
and braced regions that may host nested declarations. Every other expression
or type collapses into an `Other*` node that only keeps its location.

Locations are half-open code-point offsets into the source text. Comments and
whitespace around a node are never part of its range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	start: int
	end: int


class Expr:
	loc: Located


@dataclass
class DeclReference(Expr):
	loc: Located
	name: str


@dataclass
class MemberAccess(Expr):
	"""`base.name`, or the implicit-member form `.name` when `base` is None."""

	loc: Located
	base: Optional[Expr]
	name: str


@dataclass
class StringLiteral(Expr):
	loc: Located
	raw: str
	value: Optional[str]  # None when the literal contains interpolation


@dataclass
class Argument:
	loc: Located
	label: Optional[str]
	expr: Expr


@dataclass
class Closure(Expr):
	loc: Located
	items: List["Item"] = field(default_factory=list)


@dataclass
class Call(Expr):
	loc: Located
	callee: Expr
	arguments: List[Argument]
	trailing_closure: Optional[Closure] = None


@dataclass
class OtherExpr(Expr):
	loc: Located


class TypeRef:
	loc: Located


@dataclass
class IdentifierType(TypeRef):
	loc: Located
	name: str
	has_generic_args: bool = False


@dataclass
class MemberType(TypeRef):
	loc: Located
	base: TypeRef
	name: str
	has_generic_args: bool = False


@dataclass
class OtherType(TypeRef):
	loc: Located


@dataclass
class Attribute:
	loc: Located
	name: TypeRef
	arguments: Optional[List[Argument]] = None  # None when written without parentheses


@dataclass
class Param:
	first_name: str
	second_name: Optional[str] = None


class Decl:
	loc: Located
	attributes: List[Attribute]
	modifiers: List[str]


@dataclass
class TypeDecl(Decl):
	"""struct, class, enum, actor or protocol declaration."""

	loc: Located
	kind: str
	name: str
	inherited: List[TypeRef] = field(default_factory=list)
	members: List["Item"] = field(default_factory=list)
	attributes: List[Attribute] = field(default_factory=list)
	modifiers: List[str] = field(default_factory=list)


@dataclass
class ExtensionDecl(Decl):
	loc: Located
	extended_type: TypeRef
	inherited: List[TypeRef] = field(default_factory=list)
	members: List["Item"] = field(default_factory=list)
	attributes: List[Attribute] = field(default_factory=list)
	modifiers: List[str] = field(default_factory=list)


@dataclass
class FunctionDecl(Decl):
	loc: Located
	name: str
	params: List[Param] = field(default_factory=list)
	body: Optional[List["Item"]] = None  # None for requirements without a body
	attributes: List[Attribute] = field(default_factory=list)
	modifiers: List[str] = field(default_factory=list)


@dataclass
class CodeBlock:
	"""Any other braced region: closures, accessors, initializer and statement bodies."""

	loc: Located
	items: List["Item"] = field(default_factory=list)


Item = Union[TypeDecl, ExtensionDecl, FunctionDecl, CodeBlock]


@dataclass
class SourceFile:
	loc: Located
	items: List[Item] = field(default_factory=list)

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Classification of `@Test` / `@Suite` attribute arguments.

An attribute's argument list reads as
`[display name] [trait, trait, ...] [label: value, ...]`: an optional leading
unlabeled string literal, then the traits, then labeled parameters such as
`arguments:`. Only the traits configure tags, disabling and hiding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from testscan.parser.ast import Attribute, Call, Expr, MemberAccess, StringLiteral

from .names import (
	CONDITION_LABEL,
	DISABLED_CALLS,
	HIDDEN_TRAITS,
	TAG_LIST_CALLS,
	member_access_components,
	normalize_tag,
	qualified_name,
)


def trait_arguments(attribute: Attribute) -> List[Expr]:
	"""Trait expressions of `attribute`, with the display name and labeled parameters sliced off."""
	arguments = attribute.arguments or []
	lower = 0
	if arguments and arguments[0].label is None and isinstance(arguments[0].expr, StringLiteral):
		lower = 1
	upper = len(arguments)
	for pos in range(lower, len(arguments)):
		if arguments[pos].label is not None:
			upper = pos
			break
	return [argument.expr for argument in arguments[lower:upper]]


def _display_name(attribute: Attribute) -> Optional[str]:
	arguments = attribute.arguments or []
	if arguments and arguments[0].label is None and isinstance(arguments[0].expr, StringLiteral):
		return arguments[0].expr.value
	return None


def _tags(traits: List[Expr]) -> Tuple[str, ...]:
	tags: List[str] = []
	for trait in traits:
		if not isinstance(trait, Call) or qualified_name(trait.callee) not in TAG_LIST_CALLS:
			continue
		for argument in trait.arguments:
			if isinstance(argument.expr, MemberAccess):
				tags.append(normalize_tag(member_access_components(argument.expr)))
	return tuple(tags)


def _is_unconditionally_disabled(call: Call) -> bool:
	if qualified_name(call.callee) not in DISABLED_CALLS:
		return False
	# `.disabled(if: ...)` and `.disabled { ... }` are decided at run time.
	if any(argument.label == CONDITION_LABEL for argument in call.arguments):
		return False
	return call.trailing_closure is None


@dataclass(frozen=True)
class TestingAttributeData:
	"""Display name, tags and disabled/hidden flags of one `@Test` or `@Suite` attribute."""

	__test__ = False

	display_name: Optional[str]
	tags: Tuple[str, ...]
	is_disabled: bool
	is_hidden: bool

	@classmethod
	def from_attribute(cls, attribute: Attribute) -> "TestingAttributeData":
		traits = trait_arguments(attribute)
		return cls(
			display_name=_display_name(attribute),
			tags=_tags(traits),
			is_disabled=any(isinstance(trait, Call) and _is_unconditionally_disabled(trait) for trait in traits),
			is_hidden=any(qualified_name(trait) in HIDDEN_TRAITS for trait in traits),
		)


__all__ = ["TestingAttributeData", "trait_arguments"]

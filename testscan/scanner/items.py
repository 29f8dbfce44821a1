# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Test items reported to test explorers and run orchestrators.

Items are built bottom-up once their children are known and never change
afterwards; `to_json` renders the language-server `TestItem` shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from testscan.core.snapshot import Range


class TestStyle(str, Enum):
	__test__ = False

	SWIFT_TESTING = "swift-testing"


@dataclass(frozen=True)
class TestTag:
	__test__ = False

	id: str

	def to_json(self) -> dict:
		return {"id": self.id}


@dataclass(frozen=True)
class Location:
	uri: str
	range: Range

	def to_json(self) -> dict:
		return {"uri": self.uri, "range": self.range.to_json()}


@dataclass(frozen=True)
class TestItem:
	"""
	One discovered test or suite.

	`id` joins the enclosing type names and the item's own name with `/`,
	e.g. `MathTests/addition()`. `disabled` already includes the state
	inherited from enclosing suites.
	"""

	__test__ = False

	id: str
	label: str
	disabled: bool
	style: TestStyle
	location: Location
	children: Tuple["TestItem", ...] = ()
	tags: Tuple[TestTag, ...] = ()

	def to_json(self) -> dict:
		return {
			"id": self.id,
			"label": self.label,
			"disabled": self.disabled,
			"style": self.style.value,
			"location": self.location.to_json(),
			"children": [child.to_json() for child in self.children],
			"tags": [tag.to_json() for tag in self.tags],
		}


__all__ = ["Location", "TestItem", "TestStyle", "TestTag"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""swift-testing test discovery over the syntax tree of one file."""

from .attributes import TestingAttributeData, trait_arguments
from .items import Location, TestItem, TestStyle, TestTag
from .scanner import (
	SwiftTestingScanner,
	VisitAction,
	declared_test_name,
	find_test_symbols,
	may_contain_tests,
	scan_source_file,
)

__all__ = [
	"Location",
	"SwiftTestingScanner",
	"TestItem",
	"TestStyle",
	"TestTag",
	"TestingAttributeData",
	"VisitAction",
	"declared_test_name",
	"find_test_symbols",
	"may_contain_tests",
	"scan_source_file",
	"trait_arguments",
]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Logging setup for the command-line driver."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING") -> None:
	# stderr keeps stdout free for --json output
	numeric_level = getattr(logging, level.upper(), logging.WARNING)
	logging.basicConfig(
		level=numeric_level,
		format=LOG_FORMAT,
		datefmt=LOG_DATEFMT,
		stream=sys.stderr,
		force=True,
	)

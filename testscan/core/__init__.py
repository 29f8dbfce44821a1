# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared plumbing: document snapshots, spans and diagnostics."""

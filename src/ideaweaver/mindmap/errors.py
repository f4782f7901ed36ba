# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Engine exceptions.

"""Exceptions raised by the mindmap engine."""


class MindmapError(Exception):
    """Base class for engine errors."""


class RelationshipError(MindmapError):
    """A parent/child change that would break the tree (self link, cycle, unknown node)."""


class BranchError(MindmapError):
    """Invalid branch name or a name clash."""

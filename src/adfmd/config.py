"""Local configuration for adfmd."""

from __future__ import annotations

import os


DEFAULT_MAX_TREE_DEPTH = 256
DEFAULT_HEADING_LEVEL = 1

# Nesting depth at which recursive rewriting and rendering give up.
ADFMD_MAX_TREE_DEPTH = int(os.getenv("ADFMD_MAX_TREE_DEPTH", str(DEFAULT_MAX_TREE_DEPTH)))

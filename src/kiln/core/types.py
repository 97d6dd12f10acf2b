"""Shared types for page addressing."""

from typing import NewType

# Site URL of a page or directory: "/", "/about/", "/about/team.html".
# Directory URLs end with "/"; index files never appear in a URLPath.
URLPath = NewType("URLPath", str)

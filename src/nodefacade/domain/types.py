"""Node subtypes and identifier constants of the backing content repository.

Subtype codes are fixed by the repository schema. A volume is a container
that owns a second, negative identifier under which its children are filed.
"""

from __future__ import annotations

from enum import IntEnum


class NodeSubtype(IntEnum):
    """Subtype codes stored in the core node table."""

    FOLDER = 0
    ALIAS = 1
    CATEGORY = 131
    DOCUMENT = 144
    PROJECT = 848


# Subtypes whose children live under the reciprocal negative identifier.
VOLUME_SUBTYPES: frozenset[int] = frozenset({NodeSubtype.PROJECT})

# Parent id shared by every top-level node.
TOP_LEVEL_PARENT_ID = -1

# First path component that selects a core column instead of a category.
CORE_NAMESPACE = "node"

# Date format accepted for quoted date literals in queries.
QUERY_DATE_FORMAT = "%d/%m/%Y"

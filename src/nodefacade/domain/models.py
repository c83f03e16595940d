"""Node records assembled from the backing store.

All records are frozen snapshots. A changed node is re-fetched, never
mutated in place.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from nodefacade.domain.types import VOLUME_SUBTYPES, NodeSubtype

AttributeScalar = datetime | int | float | str


class NodeCoreDetails(BaseModel):
    """Core row of a node (parentage, identity, current version)."""

    model_config = {"frozen": True}

    parent_id: int
    data_id: int
    version_num: int
    name: str
    sub_type: int
    origin_data_id: int = 0
    create_date: datetime | None = None
    modify_date: datetime | None = None

    @property
    def is_alias(self) -> bool:
        return self.sub_type == NodeSubtype.ALIAS

    @property
    def is_volume(self) -> bool:
        return self.sub_type in VOLUME_SUBTYPES

    @property
    def is_document(self) -> bool:
        return self.sub_type == NodeSubtype.DOCUMENT

    @property
    def is_folder(self) -> bool:
        return self.sub_type == NodeSubtype.FOLDER

    @property
    def child_parent_id(self) -> int:
        """Parent id under which this node's children are filed.

        Aliases defer to their origin, volumes file children under the
        negative reciprocal id, everything else under its own id.
        """
        if self.is_alias:
            return self.origin_data_id
        if self.is_volume:
            return -self.data_id
        return self.data_id


class NodeVersionDetails(BaseModel):
    """One stored version of a node."""

    model_config = {"frozen": True}

    version_id: int
    version_number: int
    create_date: datetime | None = None
    modify_date: datetime | None = None
    file_create_date: datetime | None = None
    file_modify_date: datetime | None = None
    filename: str | None = None
    size_bytes: int = 0
    mime_type: str | None = None


class NodeAttributeDetails(BaseModel):
    """A category attribute value attached to a node.

    INVARIANT: at most one typed value slot is populated.
    """

    model_config = {"frozen": True}

    category: str
    attribute: str
    attribute_type: int
    val_date: datetime | None = None
    val_int: int | None = None
    val_long: int | None = None
    val_real: float | None = None
    val_string: str | None = None

    @model_validator(mode="after")
    def _single_slot(self) -> NodeAttributeDetails:
        populated = [
            slot
            for slot in (self.val_date, self.val_int, self.val_long, self.val_real, self.val_string)
            if slot is not None
        ]
        if len(populated) > 1:
            msg = f"Attribute {self.category}.{self.attribute} has {len(populated)} values set"
            raise ValueError(msg)
        return self

    @property
    def value(self) -> AttributeScalar | None:
        """The populated value slot, or None for an empty attribute."""
        for slot in (self.val_int, self.val_long, self.val_real, self.val_string, self.val_date):
            if slot is not None:
                return slot
        return None


class NodeDetails(BaseModel):
    """Core row plus versions and current attribute values for one node."""

    model_config = {"frozen": True}

    core: NodeCoreDetails
    versions: tuple[NodeVersionDetails, ...] = Field(default_factory=tuple)
    attributes: tuple[NodeAttributeDetails, ...] = Field(default_factory=tuple)

    @property
    def has_versions(self) -> bool:
        return bool(self.versions)

    @property
    def has_attributes(self) -> bool:
        return bool(self.attributes)

    def attributes_by_category(self) -> dict[str, list[NodeAttributeDetails]]:
        """Group attributes by category name, preserving store order."""
        grouped: dict[str, list[NodeAttributeDetails]] = {}
        for attribute in self.attributes:
            grouped.setdefault(attribute.category, []).append(attribute)
        return grouped

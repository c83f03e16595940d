"""SQLAlchemy Core table definitions for the content repository store.

The facade only reads these tables. ``Facade_Category`` and
``Facade_Attributes`` are views over the category tables; they are
described as tables in a separate :data:`views` metadata so
``metadata.create_all`` never tries to create them, and their SQLite DDL
lives in the string constants below.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

dtree_core = Table(
    "DTreeCore",
    metadata,
    Column("DataID", Integer, primary_key=True, autoincrement=False),
    Column("ParentID", Integer, nullable=False),
    Column("OwnerID", Integer),
    Column("VersionNum", Integer, nullable=False, default=1, server_default="1"),
    Column("Name", Text, nullable=False),
    Column("SubType", Integer, nullable=False),
    Column("OriginDataID", Integer, default=0, server_default="0"),
    Column("CreateDate", DateTime),
    Column("ModifyDate", DateTime),
    Column("Deleted", Integer, default=0, server_default="0"),
)

dvers_data = Table(
    "DVersData",
    metadata,
    Column("VersionID", Integer, primary_key=True, autoincrement=False),
    Column("DocID", Integer, nullable=False),
    Column("Version", Integer, nullable=False),
    Column("VerCDate", DateTime),
    Column("VerMDate", DateTime),
    Column("FileCDate", DateTime),
    Column("FileMDate", DateTime),
    Column("FileName", Text),
    Column("DataSize", Integer, default=0, server_default="0"),
    Column("MimeType", Text),
)

ll_attr_data = Table(
    "LLAttrData",
    metadata,
    Column("ID", Integer, nullable=False),  # DTreeCore.DataID
    Column("VerNum", Integer, nullable=False),  # node version the value belongs to
    Column("DefID", Integer, nullable=False),  # category DataID
    Column("DefVerN", Integer, nullable=False),  # category definition version
    Column("AttrID", Integer, nullable=False),
    Column("AttrType", Integer, nullable=False),
    Column("EntryNum", Integer, default=1, server_default="1"),
    Column("ValDate", DateTime),
    Column("ValInt", Integer),
    Column("ValLong", Integer),
    Column("ValReal", REAL),
    Column("ValStr", Text),
)

cat_region_map = Table(
    "CatRegionMap",
    metadata,
    Column("CatID", Integer, nullable=False),
    Column("CatName", Text, nullable=False),
    Column("SetName", Text),
    Column("AttrName", Text, nullable=False),
    Column("AttrType", Integer),
    Column("RegionName", Text, primary_key=True),  # e.g. Attr_9000_2
)

k_ini = Table(
    "KIni",
    metadata,
    Column("IniSection", Text, nullable=False),
    Column("IniKeyword", Text, nullable=False),
    Column("IniValue", Text),
)

# ---------------------------------------------------------------------------
# Indexes for the lookups issued on every path step and detail load
# ---------------------------------------------------------------------------

Index("ix_dtreecore_parent_name", dtree_core.c.ParentID, dtree_core.c.Name)
Index("ix_dversdata_doc", dvers_data.c.DocID)
Index("ix_llattrdata_node", ll_attr_data.c.ID, ll_attr_data.c.VerNum)

# ---------------------------------------------------------------------------
# Views (read-only shapes, never created by create_all)
# ---------------------------------------------------------------------------

views = MetaData()

facade_category = Table(
    "Facade_Category",
    views,
    Column("DataID", Integer),
    Column("Name", Text),
    Column("CurrentVersion", Integer),
)

facade_attributes = Table(
    "Facade_Attributes",
    views,
    Column("CategoryId", Integer),
    Column("Category", Text),
    Column("CategoryVersion", Integer),
    Column("Attribute", Text),
    Column("AttributeIndex", Integer),
)

# Name of the scalar SQL function that extracts the trailing attribute
# index from a CatRegionMap region name (``Attr_9000_2`` -> 2).
ATTRIBUTE_INDEX_FUNCTION = "facade_attribute_index"

FACADE_CATEGORY_VIEW_SQL = (
    "CREATE VIEW IF NOT EXISTS Facade_Category AS "
    "SELECT DataID, Name, VersionNum AS CurrentVersion "
    "FROM DTreeCore WHERE SubType = 131"
)

FACADE_ATTRIBUTES_VIEW_SQL = f"""
CREATE VIEW IF NOT EXISTS Facade_Attributes AS
SELECT c.DataID AS CategoryId,
       m.CatName AS Category,
       c.CurrentVersion AS CategoryVersion,
       m.AttrName AS Attribute,
       {ATTRIBUTE_INDEX_FUNCTION}(m.RegionName) AS AttributeIndex
FROM Facade_Category AS c
INNER JOIN CatRegionMap AS m ON c.DataID = m.CatID
GROUP BY c.DataID, m.CatName, m.AttrName, m.AttrType,
         {ATTRIBUTE_INDEX_FUNCTION}(m.RegionName), c.CurrentVersion
"""

VIEW_DDL = (FACADE_CATEGORY_VIEW_SQL, FACADE_ATTRIBUTES_VIEW_SQL)

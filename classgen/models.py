# File: classgen/models.py
"""
ClassGen - Core Data Models
============================
Pydantic V2 models for the table model consumed by the class builder and
for the per-run builder options.

    TableInfo / ColumnInfo    read-only description of one table.
    SchemaDefinition          every table of a model file plus the enum and
                              type names the conversion policy may resolve.
    BuilderOption             immutable generation settings; runs derive a
                              modified copy instead of mutating a shared one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NAME_PLACEHOLDER: str = "{name}"
INTERFACE_PREFIX: str = "I"
SYSTEM_NAMESPACE: str = "System"
EXTEND_USING: str = "NewLife.Data"

DEFAULT_USINGS: Tuple[str, ...] = (
    "System",
    "System.Collections.Generic",
    "System.ComponentModel",
    "System.Runtime.Serialization",
    "System.Web.Script.Serialization",
    "System.Xml.Serialization",
)


# ---------------------------------------------------------------------------
# Structural type descriptor
# ---------------------------------------------------------------------------


class DataType(str, Enum):
    """Canonical structural column types (CLR type names)."""

    BOOLEAN = "Boolean"
    BYTE = "Byte"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    SINGLE = "Single"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    DATETIME = "DateTime"
    STRING = "String"
    GUID = "Guid"
    TIMESPAN = "TimeSpan"
    BINARY = "Byte[]"
    OBJECT = "Object"


# Lower-cased spellings accepted in model files
_DATA_TYPE_ALIASES: Dict[str, DataType] = {
    "bool": DataType.BOOLEAN,
    "boolean": DataType.BOOLEAN,
    "bit": DataType.BOOLEAN,
    "byte": DataType.BYTE,
    "tinyint": DataType.BYTE,
    "short": DataType.INT16,
    "smallint": DataType.INT16,
    "int16": DataType.INT16,
    "int": DataType.INT32,
    "integer": DataType.INT32,
    "int32": DataType.INT32,
    "long": DataType.INT64,
    "bigint": DataType.INT64,
    "biginteger": DataType.INT64,
    "int64": DataType.INT64,
    "float": DataType.SINGLE,
    "real": DataType.SINGLE,
    "single": DataType.SINGLE,
    "double": DataType.DOUBLE,
    "decimal": DataType.DECIMAL,
    "numeric": DataType.DECIMAL,
    "money": DataType.DECIMAL,
    "date": DataType.DATETIME,
    "datetime": DataType.DATETIME,
    "timestamp": DataType.DATETIME,
    "string": DataType.STRING,
    "text": DataType.STRING,
    "char": DataType.STRING,
    "varchar": DataType.STRING,
    "nvarchar": DataType.STRING,
    "guid": DataType.GUID,
    "uuid": DataType.GUID,
    "timespan": DataType.TIMESPAN,
    "interval": DataType.TIMESPAN,
    "byte[]": DataType.BINARY,
    "binary": DataType.BINARY,
    "blob": DataType.BINARY,
    "bytes": DataType.BINARY,
    "object": DataType.OBJECT,
}


def parse_data_type(value: Any) -> DataType:
    """
    Normalise a model-file type spelling to a ``DataType``.

    Accepts enum members, canonical names (``Int32``), the ``System.``
    qualified form and the aliases above, case-insensitively.
    """
    if isinstance(value, DataType):
        return value
    text: str = str(value).strip()
    if text.startswith(SYSTEM_NAMESPACE + "."):
        text = text[len(SYSTEM_NAMESPACE) + 1:]
    try:
        return DataType(text)
    except ValueError:
        pass
    found: Optional[DataType] = _DATA_TYPE_ALIASES.get(text.lower())
    if found is None:
        raise ValueError(
            f"Unknown data type '{value}'. "
            f"Expected one of: {', '.join(t.value for t in DataType)}."
        )
    return found


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Column
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """
    One column of a table.

    ``properties`` is a free-form bag; its ``Type`` entry overrides the
    textual type token emitted for the column.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Column (and member) name.")
    data_type: DataType = Field(
        ...,
        validation_alias=AliasChoices("data_type", "dataType", "DataType", "type"),
        description="Structural type descriptor.",
    )
    properties: Dict[str, Any] = Field(
        default_factory=dict, description="Extra attributes, e.g. 'Type'."
    )
    description: Optional[str] = Field(default=None, description="Column comment.")
    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName", "DisplayName"),
        description="Human readable caption.",
    )

    @field_validator("data_type", mode="before")
    @classmethod
    def _normalise_data_type(cls, v: Any) -> DataType:
        return parse_data_type(v)

    def get_property(self, key: str) -> Optional[str]:
        """Case-insensitive property-bag lookup; ``None`` when absent."""
        lowered: str = key.lower()
        for k, v in self.properties.items():
            if k.lower() == lowered and v is not None:
                return str(v)
        return None

    def __repr__(self) -> str:
        return f"<Column {self.name} {self.data_type.value}>"


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class TableInfo(BaseModel):
    """
    A table: name, captions and its ordered columns.

    Column order is significant and is the order members are emitted in.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Table name.")
    description: Optional[str] = Field(default=None, description="Table comment.")
    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName", "DisplayName"),
        description="Human readable caption, also used as a file name.",
    )
    columns: List[ColumnInfo] = Field(
        default_factory=list, description="Columns in declaration order."
    )

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @model_validator(mode="after")
    def _validate_unique_column_names(self) -> "TableInfo":
        names: List[str] = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            dupes: List[str] = [n for n in names if names.count(n) > 1]
            raise ValueError(
                f"Duplicate column names in table '{self.name}': "
                f"{sorted(set(dupes))}"
            )
        return self

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def __repr__(self) -> str:
        return f"<Table {self.name} ({len(self.columns)} cols)>"


# ---------------------------------------------------------------------------
# Schema Definition: top-level container
# ---------------------------------------------------------------------------


class SchemaDefinition(BaseModel):
    """All tables of one model file."""

    model_config = _SHARED_CONFIG

    tables: List[TableInfo] = Field(
        default_factory=list, description="Tables in declaration order."
    )
    enums: List[str] = Field(
        default_factory=list,
        description="Enumeration type names that column type overrides may use.",
    )
    known_types: List[str] = Field(
        default_factory=list,
        description="Additional non-enum type names considered resolvable.",
    )
    attributes: Dict[str, str] = Field(
        default_factory=dict,
        description="Root attributes of the model file (Output, NameSpace, ...).",
    )
    source_file: Optional[str] = Field(
        default=None, description="Model file path."
    )

    @model_validator(mode="after")
    def _validate_unique_table_names(self) -> "SchemaDefinition":
        names: List[str] = [t.name for t in self.tables]
        if len(names) != len(set(names)):
            dupes: List[str] = [n for n in names if names.count(n) > 1]
            raise ValueError(f"Duplicate table names: {sorted(set(dupes))}")
        return self

    def get_table(self, name: str) -> Optional[TableInfo]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    @property
    def table_count(self) -> int:
        return len(self.tables)

    def __repr__(self) -> str:
        return f"<SchemaDefinition {self.table_count} tables>"


# ---------------------------------------------------------------------------
# Builder options
# ---------------------------------------------------------------------------


class BuilderOption(BaseModel):
    """
    Generation settings for one builder run.

    Frozen: a batch derives one value per table with ``derive()`` so no run
    can observe another run's changes.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    output: str = Field(
        default=".",
        validation_alias=AliasChoices("output", "Output"),
        description="Destination directory.",
    )
    namespace: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("namespace", "NameSpace", "Namespace"),
        description="Namespace wrapping the generated type.",
    )
    conn_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("conn_name", "connName", "ConnName"),
        description="Connection name hint, passed through untouched.",
    )
    base_class: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("base_class", "baseClass", "BaseClass"),
        description="Base type template; '{name}' becomes the table name.",
    )
    class_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "class_template", "classNameTemplate", "ClassTemplate"
        ),
        description="Class name template; '{name}' becomes the table name.",
    )
    interface: bool = Field(default=False, description="Emit an interface.")
    pure: bool = Field(default=False, description="Suppress attributes.")
    partial: bool = Field(default=False, description="Emit a partial type.")
    extend: bool = Field(default=False, description="Emit the name indexer.")
    usings: Tuple[str, ...] = Field(
        default=DEFAULT_USINGS, description="Namespaces to import."
    )

    @field_validator("usings", mode="before")
    @classmethod
    def _normalise_usings(cls, v: Any) -> Tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        seen: Set[str] = set()
        result: List[str] = []
        for item in v:
            name: str = str(item).strip()
            if name and name not in seen:
                seen.add(name)
                result.append(name)
        return tuple(result)

    # -- Derivation ---------------------------------------------------------

    def derive(self, **changes: Any) -> "BuilderOption":
        """
        Return a validated copy with *changes* applied.

        *changes* may use field names or any accepted alias (``baseClass``,
        ``NameSpace`` ...).
        """
        data: Dict[str, Any] = self.model_dump()
        data.update(BuilderOption.normalise_keys(changes))
        return BuilderOption.model_validate(data)

    @classmethod
    def normalise_keys(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Validate *values* on their own and return them keyed by field name."""
        return cls.model_validate(values).model_dump(exclude_unset=True)

    def with_usings(self, *names: str) -> "BuilderOption":
        """Return a copy importing *names* on top of the current usings."""
        return self.derive(usings=self.usings + names)

    def clone(self) -> "BuilderOption":
        """Return an equal, independent copy."""
        return self.model_copy(deep=True)

    # -- Template resolution ------------------------------------------------

    def resolve_class_name(self, table_name: str) -> str:
        if self.class_template:
            return self.class_template.replace(NAME_PLACEHOLDER, table_name)
        return INTERFACE_PREFIX + table_name if self.interface else table_name

    def resolve_base_class(self, table_name: str) -> Optional[str]:
        if not self.base_class:
            return None
        return self.base_class.replace(NAME_PLACEHOLDER, table_name)

    def effective_usings(self) -> List[str]:
        """
        Usings to emit: deduplicated, ``System*`` first, then alphabetical.

        Extend mode adds the extension-support namespace.
        """
        names: Set[str] = set(self.usings)
        if self.extend:
            names.add(EXTEND_USING)
        return sorted(
            names,
            key=lambda n: (0 if n.startswith(SYSTEM_NAMESPACE) else 1, n),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "NAME_PLACEHOLDER",
    "EXTEND_USING",
    "DEFAULT_USINGS",
    "DataType",
    "parse_data_type",
    "ColumnInfo",
    "TableInfo",
    "SchemaDefinition",
    "BuilderOption",
]

logger.debug("classgen.models loaded, %d public symbols.", len(__all__))

# File: classgen/conversion.py
"""
ClassGen - Type & Conversion Policy
=====================================
Decides, per column, which type token is emitted and how the extended
name indexer coerces an untyped ``value`` into that type.

Strategy precedence (first match wins):

    1. Int32 / Int64 / Double / Boolean / DateTime → extension helper
       (``value.ToInt()`` ...)
    2. other undotted type with a ``Convert.To<T>(Object)`` overload
       → ``Convert.To<T>(value)``
    3. type resolving to a declared enumeration → ``(<T>)value.ToInt()``
    4. any other resolvable type → ``(<T>)value``
    5. unresolvable type → ``(<T>)value``; reported, never raised
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

from classgen.models import ColumnInfo, SchemaDefinition

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.conversion")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TYPE_PROPERTY: str = "Type"

# Types with a System.Convert.To<T>(Object) overload
CONVERTIBLE_TYPES: FrozenSet[str] = frozenset({
    "Boolean", "Byte", "Char", "DateTime", "Decimal", "Double", "Int16",
    "Int32", "Int64", "SByte", "Single", "String", "UInt16", "UInt32",
    "UInt64",
})

# Framework types that resolve but are not enumerations
_FRAMEWORK_TYPES: FrozenSet[str] = CONVERTIBLE_TYPES | frozenset({
    "Object", "Guid", "TimeSpan", "DateTimeOffset", "Byte[]", "Uri",
    "Version", "Type",
})


class CoercionStrategy(str, Enum):
    """How the indexer setter turns ``value`` into the member type."""

    TO_INT = "to_int"
    TO_LONG = "to_long"
    TO_DOUBLE = "to_double"
    TO_BOOLEAN = "to_boolean"
    TO_DATETIME = "to_datetime"
    CONVERT = "convert"
    ENUM = "enum"
    CAST = "cast"


_HELPER_STRATEGIES: Dict[str, CoercionStrategy] = {
    "Int32": CoercionStrategy.TO_INT,
    "Int64": CoercionStrategy.TO_LONG,
    "Double": CoercionStrategy.TO_DOUBLE,
    "Boolean": CoercionStrategy.TO_BOOLEAN,
    "DateTime": CoercionStrategy.TO_DATETIME,
}

# Expression patterns; {type} is the member type token
_COERCION_TEMPLATES: Dict[CoercionStrategy, str] = {
    CoercionStrategy.TO_INT: "value.ToInt()",
    CoercionStrategy.TO_LONG: "value.ToLong()",
    CoercionStrategy.TO_DOUBLE: "value.ToDouble()",
    CoercionStrategy.TO_BOOLEAN: "value.ToBoolean()",
    CoercionStrategy.TO_DATETIME: "value.ToDateTime()",
    CoercionStrategy.CONVERT: "Convert.To{type}(value)",
    CoercionStrategy.ENUM: "({type})value.ToInt()",
    CoercionStrategy.CAST: "({type})value",
}


# ---------------------------------------------------------------------------
# Type token
# ---------------------------------------------------------------------------


def resolve_type_token(column: ColumnInfo) -> str:
    """
    The type text emitted for *column*.

    A non-empty ``Type`` property overrides the structural data type.
    """
    override: Optional[str] = column.get_property(TYPE_PROPERTY)
    if override and override.strip():
        return override.strip()
    return column.data_type.value


# ---------------------------------------------------------------------------
# Type resolution
# ---------------------------------------------------------------------------


class TypeResolutionError(LookupError):
    """Raised when a type token is unknown to the resolver."""


@dataclass(frozen=True)
class ResolvedType:
    name: str
    is_enum: bool = False


class TypeResolver:
    """
    Registry of type names the generated program can see.

    Framework types are always known; enumerations and extra types come
    from the model file (``SchemaDefinition.enums`` / ``known_types``).
    """

    def __init__(
        self,
        enums: Iterable[str] = (),
        known_types: Iterable[str] = (),
    ) -> None:
        self._enums: FrozenSet[str] = frozenset(enums)
        self._types: FrozenSet[str] = _FRAMEWORK_TYPES | frozenset(known_types)

    @classmethod
    def from_schema(cls, schema: SchemaDefinition) -> "TypeResolver":
        return cls(enums=schema.enums, known_types=schema.known_types)

    def resolve(self, token: str) -> ResolvedType:
        """
        Resolve *token* by full name, then by its last dotted segment.

        Raises:
            TypeResolutionError: when neither form is known.
        """
        candidates: List[str] = [token]
        if "." in token:
            candidates.append(token.rsplit(".", 1)[1])
        for name in candidates:
            if name in self._enums:
                return ResolvedType(token, is_enum=True)
            if name in self._types:
                return ResolvedType(token)
        raise TypeResolutionError(f"Type '{token}' cannot be resolved.")

    def is_known(self, token: str) -> bool:
        try:
            self.resolve(token)
        except TypeResolutionError:
            return False
        return True

    def __repr__(self) -> str:
        return f"<TypeResolver {len(self._enums)} enums, {len(self._types)} types>"


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


def select_strategy(
    type_token: str,
    resolver: TypeResolver,
    warnings: Optional[List[str]] = None,
    log: Optional[logging.Logger] = None,
    column_name: Optional[str] = None,
) -> CoercionStrategy:
    """
    Pick the coercion strategy for *type_token*.

    A resolution failure is logged to *log* and appended to *warnings*;
    the naive cast is returned in that case.
    """
    if "." not in type_token:
        helper: Optional[CoercionStrategy] = _HELPER_STRATEGIES.get(type_token)
        if helper is not None:
            return helper
        if type_token in CONVERTIBLE_TYPES:
            return CoercionStrategy.CONVERT

    try:
        resolved: ResolvedType = resolver.resolve(type_token)
    except TypeResolutionError as exc:
        message: str = f"Column '{column_name}': {exc}" if column_name else str(exc)
        (log or logger).warning("%s Falling back to a direct cast.", message)
        if warnings is not None:
            warnings.append(message)
        return CoercionStrategy.CAST

    return CoercionStrategy.ENUM if resolved.is_enum else CoercionStrategy.CAST


def render_coercion(strategy: CoercionStrategy, type_token: str) -> str:
    """Return the C# expression converting ``value`` for *strategy*."""
    return _COERCION_TEMPLATES[strategy].format(type=type_token)


# ---------------------------------------------------------------------------
# Accessor entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccessorEntry:
    """One case of the name indexer: member name, type token, coercion."""

    name: str
    type_token: str
    strategy: CoercionStrategy

    @property
    def coercion(self) -> str:
        return render_coercion(self.strategy, self.type_token)


def build_accessor_entries(
    columns: Sequence[ColumnInfo],
    resolver: TypeResolver,
    warnings: Optional[List[str]] = None,
    log: Optional[logging.Logger] = None,
) -> List[AccessorEntry]:
    """Build indexer entries for *columns*, preserving their order."""
    entries: List[AccessorEntry] = []
    for col in columns:
        token: str = resolve_type_token(col)
        strategy: CoercionStrategy = select_strategy(
            token, resolver, warnings, log, column_name=col.name
        )
        entries.append(AccessorEntry(col.name, token, strategy))
    return entries


__all__: List[str] = [
    "CONVERTIBLE_TYPES",
    "CoercionStrategy",
    "TypeResolutionError",
    "ResolvedType",
    "TypeResolver",
    "AccessorEntry",
    "resolve_type_token",
    "select_strategy",
    "render_coercion",
    "build_accessor_entries",
]

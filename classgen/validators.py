# File: classgen/validators.py
"""
ClassGen - Model & Option Checks
=================================
Semantic checks run before generation.  The builder emits names and types
verbatim and never sanitises them, so anything that would make the output
fail to compile is reported here as a warning; nothing in this module stops
a run.

Pydantic already rejects structurally broken models (missing names,
unknown data types, duplicate tables or columns).

Usage:
    from classgen.validators import validate_full
    result = validate_full(schema, option)
    for item in result.warnings:
        print(item)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from classgen.conversion import TYPE_PROPERTY, TypeResolver
from classgen.models import NAME_PLACEHOLDER, BuilderOption, SchemaDefinition

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    def summary(self) -> str:
        return f"Validation: {len(self.warnings)} warning(s)."

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^@?[A-Za-z_][A-Za-z0-9_]*$")

# C# reserved keywords; contextual keywords (var, get, set, ...) are legal names
_CSHARP_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal",
        "default", "delegate", "do", "double", "else", "enum", "event",
        "explicit", "extern", "false", "finally", "fixed", "float", "for",
        "foreach", "goto", "if", "implicit", "in", "int", "interface",
        "internal", "is", "lock", "long", "namespace", "new", "null",
        "object", "operator", "out", "override", "params", "private",
        "protected", "public", "readonly", "ref", "return", "sbyte",
        "sealed", "short", "sizeof", "stackalloc", "static", "string",
        "struct", "switch", "this", "throw", "true", "try", "typeof",
        "uint", "ulong", "unchecked", "unsafe", "ushort", "using",
        "virtual", "void", "volatile", "while",
    }
)


def is_identifier(name: str) -> bool:
    """True when *name* is usable as a C# member or type name."""
    return bool(_IDENTIFIER_RE.match(name)) and name not in _CSHARP_KEYWORDS


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_table_names(schema: SchemaDefinition) -> ValidationResult:
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        if not is_identifier(table.name):
            result.add_warning(
                "INVALID_TABLE_NAME",
                f"Table name '{table.name}' is not a valid C# identifier.",
                {"table": table.name},
            )
    return result


def validate_column_names(schema: SchemaDefinition) -> ValidationResult:
    """Column names become property names and indexer case labels."""
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        for col in table.columns:
            ctx: Dict[str, Any] = {"table": table.name, "column": col.name}
            if col.name in _CSHARP_KEYWORDS:
                result.add_warning(
                    "COLUMN_NAME_KEYWORD",
                    f"Column '{table.name}.{col.name}' is a C# keyword.",
                    ctx,
                )
            elif not _IDENTIFIER_RE.match(col.name):
                result.add_warning(
                    "INVALID_COLUMN_NAME",
                    f"Column '{table.name}.{col.name}' is not a valid "
                    f"C# identifier.",
                    ctx,
                )
            if col.name == table.name:
                result.add_warning(
                    "COLUMN_NAME_EQUALS_TABLE",
                    f"Column '{col.name}' has the same name as its table; "
                    f"member names cannot match their enclosing type.",
                    ctx,
                )
    return result


def validate_empty_tables(schema: SchemaDefinition) -> ValidationResult:
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        if not table.columns:
            result.add_warning(
                "TABLE_WITHOUT_COLUMNS",
                f"Table '{table.name}' has no columns; an empty type will "
                f"be generated.",
                {"table": table.name},
            )
    return result


def validate_type_overrides(
    schema: SchemaDefinition,
    resolver: Optional[TypeResolver] = None,
) -> ValidationResult:
    """
    Check ``Type`` property overrides against the type registry.

    The same lookup happens during extend-mode generation; reporting it here
    surfaces the problem for every mode.
    """
    result: ValidationResult = ValidationResult()
    registry: TypeResolver = resolver or TypeResolver.from_schema(schema)
    for table in schema.tables:
        for col in table.columns:
            override: Optional[str] = col.get_property(TYPE_PROPERTY)
            if not override or not override.strip():
                continue
            if not registry.is_known(override.strip()):
                result.add_warning(
                    "UNKNOWN_TYPE_OVERRIDE",
                    f"Column '{table.name}.{col.name}' overrides its type "
                    f"with unknown type '{override.strip()}'.",
                    {"table": table.name, "column": col.name},
                )
    return result


def validate_option(option: BuilderOption) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    if option.namespace:
        for segment in option.namespace.split("."):
            if not is_identifier(segment):
                result.add_warning(
                    "INVALID_NAMESPACE",
                    f"Namespace '{option.namespace}' has an invalid segment "
                    f"'{segment}'.",
                    {"namespace": option.namespace},
                )
                break

    if option.class_template and NAME_PLACEHOLDER not in option.class_template:
        result.add_warning(
            "CLASS_TEMPLATE_WITHOUT_NAME",
            f"Class template '{option.class_template}' has no "
            f"'{NAME_PLACEHOLDER}' placeholder; every table gets the same "
            f"class name.",
            {"class_template": option.class_template},
        )

    if option.pure and option.extend:
        result.add_warning(
            "PURE_WITH_EXTEND",
            "Pure mode still emits the name indexer when extend is on.",
        )

    return result


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def validate_schema(
    schema: SchemaDefinition,
    resolver: Optional[TypeResolver] = None,
) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    validators: List[Callable[[SchemaDefinition], ValidationResult]] = [
        validate_table_names,
        validate_column_names,
        validate_empty_tables,
    ]
    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(schema))
    result.merge(validate_type_overrides(schema, resolver))

    logger.info("Model validation complete: %s", result.summary())
    return result


def validate_full(
    schema: SchemaDefinition,
    option: BuilderOption,
    resolver: Optional[TypeResolver] = None,
) -> ValidationResult:
    """Run the model checks and the option checks."""
    result: ValidationResult = validate_schema(schema, resolver)
    result.merge(validate_option(option))
    if result.warnings:
        logger.warning(
            "%d warning(s) for %d table(s).",
            len(result.warnings),
            schema.table_count,
        )
    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "is_identifier",
    "validate_table_names",
    "validate_column_names",
    "validate_empty_tables",
    "validate_type_overrides",
    "validate_option",
    "validate_schema",
    "validate_full",
]

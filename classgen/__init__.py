# File: classgen/__init__.py
"""
ClassGen - C# Entity Class Generator
=====================================

Turns table models (XML, YAML or JSON) into C# entity classes or
interfaces, one source file per table.

Architecture overview::

    cli.py ──▶ generator.py ──▶ builder.py ──▶ writer.py
                   │                │
                   ▼                ├──▶ conversion.py
               loader.py            └──▶ exporters.py
               validators.py
                   │
                   ▼
               models.py

Usage::

    # As a library
    from classgen import BuilderOption, ClassBuilder, load_models
    schema, option = load_models(Path("Model.xml"))
    for table in schema.tables:
        builder = ClassBuilder(table, option.clone())
        builder.execute()
        builder.save()

    # From the command line
    classgen -m Model.xml -o ./Entity --namespace Demo.Data

Public API:
    - ClassBuilder        generation session for one table
    - BuilderOption       immutable generation settings
    - generate_one        one table to text
    - build_models        batch of plain classes
    - build_interfaces    batch of interfaces
    - generate_from_file  model file to files plus a report
"""

from __future__ import annotations

import logging

__version__: str = "1.0.0"
__author__: str = "ClassGen Team"
__license__: str = "MIT"

# No output unless the application configures logging
logging.getLogger("classgen").addHandler(logging.NullHandler())

from classgen.models import (
    DataType,
    ColumnInfo,
    TableInfo,
    SchemaDefinition,
    BuilderOption,
)
from classgen.writer import LineWriter
from classgen.conversion import (
    AccessorEntry,
    CoercionStrategy,
    TypeResolutionError,
    TypeResolver,
)
from classgen.builder import BuilderState, BuilderStateError, ClassBuilder
from classgen.loader import ModelFileNotFoundError, load_models
from classgen.validators import ValidationResult, validate_full
from classgen.generator import (
    GenerationReport,
    build_interfaces,
    build_models,
    generate_from_file,
    generate_one,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Models
    "DataType",
    "ColumnInfo",
    "TableInfo",
    "SchemaDefinition",
    "BuilderOption",
    # Engine
    "LineWriter",
    "AccessorEntry",
    "CoercionStrategy",
    "TypeResolutionError",
    "TypeResolver",
    "BuilderState",
    "BuilderStateError",
    "ClassBuilder",
    # Input and checks
    "ModelFileNotFoundError",
    "load_models",
    "ValidationResult",
    "validate_full",
    # Entry points
    "GenerationReport",
    "generate_one",
    "build_models",
    "build_interfaces",
    "generate_from_file",
]

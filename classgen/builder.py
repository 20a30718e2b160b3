# File: classgen/builder.py
"""
ClassGen - Class Builder (Generator Engine)
============================================
Emits the C# source of one class or interface whose members mirror the
columns of a ``TableInfo``.

One ``execute()`` walks the session through its phases::

    CREATED → HEADER_EMITTED → BODY_EMITTED → FOOTER_EMITTED → FINALIZED
                                                   (save) ──────┘

    header  usings, namespace opener, type doc comment, attributes,
            declaration line
    body    one property per column inside a region, then the optional
            name indexer
    footer  closes the type and the namespace

``execute()`` always starts from a cleared writer, so running it again for
the same table and options produces identical text.  Each ``build_*``
method is a hook a subclass may override to change one part of the output.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from classgen.conversion import (
    AccessorEntry,
    TypeResolver,
    build_accessor_entries,
    resolve_type_token,
)
from classgen.exporters import resolve_output_path, save_text
from classgen.models import BuilderOption, ColumnInfo, TableInfo
from classgen.writer import LineWriter

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.builder")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PROPERTIES_REGION: str = "Properties"
INDEXER_REGION: str = "Get/Set Field Values"
KEY_NOT_FOUND_LINE: str = 'default: throw new KeyNotFoundException($"{name} not found");'


class BuilderState(str, Enum):
    CREATED = "created"
    HEADER_EMITTED = "header_emitted"
    BODY_EMITTED = "body_emitted"
    FOOTER_EMITTED = "footer_emitted"
    FINALIZED = "finalized"


class BuilderStateError(RuntimeError):
    """Raised when a generation phase runs out of order."""


# ---------------------------------------------------------------------------
# Indexer template
# ---------------------------------------------------------------------------


def render_indexer(entries: List[AccessorEntry]) -> List[str]:
    """
    Expand the name indexer for *entries* into writer lines.

    Getter and setter dispatch over the entries in order; an unknown name
    throws ``KeyNotFoundException`` in the generated program.
    """
    lines: List[str] = [
        f"#region {INDEXER_REGION}",
        "/// <summary>Gets or sets a field value by name</summary>",
        '/// <param name="name">Field name</param>',
        "/// <returns></returns>",
        "public virtual Object this[String name]",
        "{",
        "get",
        "{",
        "switch (name)",
        "{",
    ]
    lines.extend(f'case "{e.name}": return {e.name};' for e in entries)
    lines.extend([KEY_NOT_FOUND_LINE, "}", "}"])

    lines.extend(["set", "{", "switch (name)", "{"])
    lines.extend(
        f'case "{e.name}": {e.name} = {e.coercion}; break;' for e in entries
    )
    lines.extend([KEY_NOT_FOUND_LINE, "}", "}"])

    lines.extend(["}", "#endregion"])
    return lines


# ---------------------------------------------------------------------------
# ClassBuilder
# ---------------------------------------------------------------------------


class ClassBuilder:
    """
    Generation session for one table.

    Usage::

        builder = ClassBuilder(table, BuilderOption(namespace="Demo"))
        builder.execute()
        print(builder.to_string())
        path = builder.save()

    Not thread-safe; create one builder per table.
    """

    def __init__(
        self,
        table: TableInfo,
        option: Optional[BuilderOption] = None,
        *,
        class_name: Optional[str] = None,
        resolver: Optional[TypeResolver] = None,
        writer: Optional[LineWriter] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.table: TableInfo = table
        self.option: BuilderOption = option or BuilderOption()
        self.class_name: Optional[str] = class_name
        self.resolver: TypeResolver = resolver or TypeResolver()
        self.writer: LineWriter = writer or LineWriter()
        self.log: logging.Logger = log or logger

        self.state: BuilderState = BuilderState.CREATED
        self.warnings: List[str] = []

    # -----------------------------------------------------------------
    # Main entry
    # -----------------------------------------------------------------

    def execute(self) -> str:
        """Run all phases and return the generated text."""
        if not self.class_name:
            self.class_name = self.option.resolve_class_name(self.table.name)
        self.log.debug("Generating %s as %s.", self.table.name, self.class_name)

        self.clear()
        self.build_header()
        self.build_items()
        self.build_footer()
        return self.to_string()

    def clear(self) -> None:
        """Reset indentation, buffered text and warnings."""
        self.writer.clear()
        self.warnings = []
        self.state = BuilderState.CREATED

    def _advance(self, expected: BuilderState, target: BuilderState) -> None:
        if self.state is not expected:
            raise BuilderStateError(
                f"Cannot move to '{target.value}' from '{self.state.value}' "
                f"(expected '{expected.value}')."
            )
        self.state = target

    def write_line(self, line: str = "") -> None:
        self.writer.write_line(line)

    # -----------------------------------------------------------------
    # Header
    # -----------------------------------------------------------------

    def build_header(self) -> None:
        if self.state is not BuilderState.CREATED:
            raise BuilderStateError("Header must be the first phase.")

        for ns in self.option.effective_usings():
            self.write_line(f"using {ns};")
        self.write_line()

        if self.option.namespace:
            self.write_line(f"namespace {self.option.namespace}")
            self.write_line("{")

        self.build_class_header()
        self._advance(BuilderState.CREATED, BuilderState.HEADER_EMITTED)

    def build_class_header(self) -> None:
        self.build_attributes()

        base_class: Optional[str] = self.get_base_class()
        base: str = f" : {base_class}" if base_class else ""
        partial: str = " partial" if self.option.partial else ""
        kind: str = "interface" if self.option.interface else "class"

        self.write_line(f"public{partial} {kind} {self.class_name}{base}")
        self.write_line("{")

    def get_base_class(self) -> Optional[str]:
        return self.option.resolve_base_class(self.table.name)

    def build_attributes(self) -> None:
        des: str = self.table.description or ""
        self.write_line(f"/// <summary>{des}</summary>")

        if not self.option.pure and not self.option.interface:
            self.write_line("[Serializable]")
            self.write_line("[DataObject]")
            if des:
                self.write_line(f'[Description("{des}")]')

    # -----------------------------------------------------------------
    # Body
    # -----------------------------------------------------------------

    def build_items(self) -> None:
        if self.state is not BuilderState.HEADER_EMITTED:
            raise BuilderStateError("Body requires the header to be emitted.")

        self.write_line(f"#region {PROPERTIES_REGION}")
        for i, column in enumerate(self.table.columns):
            if i > 0:
                self.write_line()
            self.build_item(column)
        self.write_line("#endregion")

        if self.option.extend:
            self.write_line()
            self.build_indexer()

        self._advance(BuilderState.HEADER_EMITTED, BuilderState.BODY_EMITTED)

    def build_item(self, column: ColumnInfo) -> None:
        des: str = column.description or ""
        self.write_line(f"/// <summary>{des}</summary>")

        if not self.option.pure and not self.option.interface:
            if des:
                self.write_line(f'[Description("{des}")]')
            if column.display_name:
                self.write_line(f'[DisplayName("{column.display_name}")]')

        type_token: str = resolve_type_token(column)
        if self.option.interface:
            self.write_line(f"{type_token} {column.name} {{ get; set; }}")
        else:
            self.write_line(f"public {type_token} {column.name} {{ get; set; }}")

    def build_indexer(self) -> None:
        entries: List[AccessorEntry] = build_accessor_entries(
            self.table.columns, self.resolver, self.warnings, self.log
        )
        self.writer.write_lines(render_indexer(entries))

    # -----------------------------------------------------------------
    # Footer
    # -----------------------------------------------------------------

    def build_footer(self) -> None:
        if self.state is not BuilderState.BODY_EMITTED:
            raise BuilderStateError("Footer requires the body to be emitted.")

        self.write_line("}")
        # The namespace brace is newline-terminated too: output ends in "}\n".
        if self.option.namespace:
            self.write_line("}")

        self._advance(BuilderState.BODY_EMITTED, BuilderState.FOOTER_EMITTED)

    # -----------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------

    def to_string(self) -> str:
        return self.writer.getvalue()

    def __str__(self) -> str:
        return self.to_string()

    def save(
        self,
        ext: Optional[str] = None,
        overwrite: bool = True,
        use_display_name: bool = True,
    ) -> Path:
        """
        Write the generated text and return the target path.

        The path is returned even when an existing file was kept.
        """
        if self.state not in (BuilderState.FOOTER_EMITTED, BuilderState.FINALIZED):
            raise BuilderStateError("Nothing to save; call execute() first.")

        path: Path = resolve_output_path(
            self.table,
            self.class_name or self.table.name,
            self.option,
            ext=ext,
            use_display_name=use_display_name,
        )
        save_text(path, self.to_string(), overwrite=overwrite)
        self.state = BuilderState.FINALIZED
        return path

    def __repr__(self) -> str:
        return (
            f"<ClassBuilder {self.table.name} as {self.class_name} "
            f"state={self.state.value}>"
        )


__all__: List[str] = [
    "BuilderState",
    "BuilderStateError",
    "ClassBuilder",
    "render_indexer",
]

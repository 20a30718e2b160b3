# File: classgen/exporters.py
"""
ClassGen - File Exporter
=========================
Turns a builder's text into a file on disk.

    output/<file base name><ext>

The file base name is the class name for interfaces; for classes it is the
table's display name when one exists and display-name files are enabled,
otherwise the class name.  Existing files are left untouched unless
``overwrite`` is set.  OS errors are not caught: an unwritable target is a
hard failure for the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from classgen.models import BuilderOption, TableInfo
from classgen.utils import write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.exporters")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_EXTENSION: str = ".cs"


def normalise_extension(ext: Optional[str]) -> str:
    """
    ``None``/empty gives ``.cs``; an extension without a dot gets ``.cs``
    appended (``"Biz"`` → ``"Biz.cs"``); anything else is used as given.
    """
    if not ext:
        return DEFAULT_EXTENSION
    if "." not in ext:
        return ext + DEFAULT_EXTENSION
    return ext


def file_base_name(
    table: TableInfo,
    class_name: str,
    option: BuilderOption,
    use_display_name: bool = True,
) -> str:
    if option.interface:
        return class_name
    if use_display_name and table.display_name:
        return table.display_name
    return class_name


def resolve_output_path(
    table: TableInfo,
    class_name: str,
    option: BuilderOption,
    ext: Optional[str] = None,
    use_display_name: bool = True,
) -> Path:
    """Compute the absolute target path for one generated type."""
    name: str = file_base_name(table, class_name, option, use_display_name)
    return (Path(option.output) / (name + normalise_extension(ext))).resolve()


def save_text(path: Path, content: str, overwrite: bool = True) -> bool:
    """
    Write *content* to *path*.

    Returns True when the file was written, False when an existing file
    was kept because *overwrite* is off.
    """
    if path.exists() and not overwrite:
        logger.info("Keeping existing file: %s", path)
        return False

    byte_count: int = write_file(path, content)
    logger.info("Saved %s (%d bytes).", path, byte_count)
    return True


__all__: List[str] = [
    "DEFAULT_EXTENSION",
    "normalise_extension",
    "file_base_name",
    "resolve_output_path",
    "save_text",
]

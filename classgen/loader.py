# File: classgen/loader.py
"""
ClassGen - Model File Loader
=============================
Reads a model file (XML, YAML or JSON) into a ``SchemaDefinition`` and
derives the builder options the file carries.

XML layout::

    <Tables Output="Entity" NameSpace="Demo.Data" ConnName="Demo" BaseClass="Entity<{name}>">
      <Table Name="User" Description="Users" DisplayName="User">
        <Columns>
          <Column Name="ID" DataType="Int32" Description="Id" />
          <Column Name="Sex" DataType="Int32" Type="SexKinds" Description="Gender" />
        </Columns>
      </Table>
    </Tables>

YAML / JSON layout::

    options: {namespace: Demo.Data, output: Entity}
    enums: [SexKinds]
    tables:
      - name: User
        description: Users
        columns:
          - {name: ID, type: Int32}
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from classgen.models import BuilderOption, SchemaDefinition

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.loader")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODEL_FILE_SUFFIXES: Tuple[str, ...] = (".xml", ".yaml", ".yml", ".json")

# XML column attributes that map onto ColumnInfo fields; the rest go to the
# property bag
_XML_COLUMN_FIELDS: Dict[str, str] = {
    "Name": "name",
    "DataType": "data_type",
    "Description": "description",
    "DisplayName": "display_name",
}

# Root attributes that feed BuilderOption
_OPTION_ATTRIBUTES: Dict[str, str] = {
    "Output": "output",
    "NameSpace": "namespace",
    "ConnName": "conn_name",
    "BaseClass": "base_class",
}


class ModelFileNotFoundError(FileNotFoundError):
    """No model file was found, or the named one does not exist."""


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------


def find_model_file(directory: Path) -> Path:
    """
    Return the first model file (by name) in *directory*.

    Raises:
        ModelFileNotFoundError: if the directory holds no model file.
    """
    candidates: List[Path] = sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in MODEL_FILE_SUFFIXES
    )
    if not candidates:
        raise ModelFileNotFoundError(f"No model file found in {directory}")
    logger.info("Using model file %s", candidates[0])
    return candidates[0]


# ---------------------------------------------------------------------------
# Raw loaders
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    import yaml

    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def _xml_column(element: ET.Element) -> Dict[str, Any]:
    column: Dict[str, Any] = {"properties": {}}
    for key, value in element.attrib.items():
        field_name: Optional[str] = _XML_COLUMN_FIELDS.get(key)
        if field_name:
            column[field_name] = value
        else:
            column["properties"][key] = value
    return column


def _load_xml_file(path: Path) -> Dict[str, Any]:
    try:
        root: ET.Element = ET.fromstring(path.read_bytes())
    except ET.ParseError as exc:
        raise ValueError(f"Invalid XML in {path}: {exc}") from exc

    tables: List[Dict[str, Any]] = []
    for table_el in root.iter("Table"):
        columns_el: Optional[ET.Element] = table_el.find("Columns")
        column_els: List[ET.Element] = (
            columns_el.findall("Column") if columns_el is not None else []
        )
        tables.append({
            "name": table_el.get("Name"),
            "description": table_el.get("Description"),
            "display_name": table_el.get("DisplayName"),
            "columns": [_xml_column(c) for c in column_els],
        })

    enums: List[str] = [e.get("Name", "") for e in root.iter("Enum") if e.get("Name")]
    return {"attributes": dict(root.attrib), "enums": enums, "tables": tables}


def load_model_file(path: Path) -> Dict[str, Any]:
    """
    Load a model file into a raw dict, dispatching on the extension.

    Raises:
        ModelFileNotFoundError: if the file doesn't exist.
        ValueError: if the file can't be parsed.
    """
    if not path.exists():
        raise ModelFileNotFoundError(f"Model file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Model path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix == ".xml":
        return _load_xml_file(path)
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s'; trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_raw_model(
    raw: Dict[str, Any],
) -> Tuple[SchemaDefinition, Dict[str, Any]]:
    """
    Validate a raw model dict.

    Returns the schema and the option values it declares (root attributes
    merged with an ``options`` section, the latter winning).
    """
    options: Dict[str, Any] = {}
    attributes: Dict[str, str] = {
        str(k): str(v) for k, v in (raw.get("attributes") or {}).items()
    }
    for attr, field_name in _OPTION_ATTRIBUTES.items():
        if attributes.get(attr):
            options[field_name] = attributes[attr]
    try:
        options.update(BuilderOption.normalise_keys(raw.get("options") or {}))
    except Exception as exc:
        raise ValueError(f"Option validation failed: {exc}") from exc

    schema_data: Dict[str, Any] = {
        "tables": raw.get("tables") or [],
        "enums": raw.get("enums") or [],
        "known_types": raw.get("known_types") or [],
        "attributes": attributes,
    }
    try:
        schema: SchemaDefinition = SchemaDefinition.model_validate(schema_data)
    except Exception as exc:
        raise ValueError(f"Model validation failed: {exc}") from exc

    return schema, options


def load_models(
    path: Optional[Path] = None,
    option: Optional[BuilderOption] = None,
) -> Tuple[SchemaDefinition, BuilderOption]:
    """
    Load tables from a model file and the options it implies.

    With no *path* the working directory is searched.  The returned option
    takes the file's ``Output`` (default: the model file's directory; a
    relative path is taken from there) and ``NameSpace`` (default: the model
    file's stem) on top of *option*.
    """
    model_path: Path = (path or find_model_file(Path.cwd())).resolve()
    raw: Dict[str, Any] = load_model_file(model_path)
    schema, declared = parse_raw_model(raw)
    schema.source_file = str(model_path)

    output: Path = Path(declared.get("output") or model_path.parent)
    if not output.is_absolute():
        output = model_path.parent / output
    declared["output"] = str(output)
    declared.setdefault("namespace", model_path.stem)
    try:
        merged: BuilderOption = (option or BuilderOption()).derive(**declared)
    except Exception as exc:
        raise ValueError(f"Option validation failed: {exc}") from exc

    logger.info(
        "Loaded %d table(s) from %s.", schema.table_count, model_path.name
    )
    return schema, merged


__all__: List[str] = [
    "MODEL_FILE_SUFFIXES",
    "ModelFileNotFoundError",
    "find_model_file",
    "load_model_file",
    "parse_raw_model",
    "load_models",
]

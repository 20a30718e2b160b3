"""
tests/conftest.py
Shared fixtures for the classgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import pathlib
import textwrap
from typing import Any, Dict

import pytest
import yaml

from classgen.models import BuilderOption, SchemaDefinition, TableInfo


# ---------------------------------------------------------------------------
# Raw model data fixtures
# ---------------------------------------------------------------------------

_USER_TABLE: Dict[str, Any] = {
    "name": "User",
    "description": "Users",
    "display_name": "UserInfo",
    "columns": [
        {"name": "ID", "type": "Integer", "description": "Id"},
        {"name": "Name", "type": "Text", "description": "Name", "display_name": "Login"},
        {"name": "Enable", "type": "Boolean", "description": "Enabled"},
    ],
}


@pytest.fixture()
def user_table_dict() -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(_USER_TABLE)


@pytest.fixture()
def user_table(user_table_dict: Dict[str, Any]) -> TableInfo:
    return TableInfo.model_validate(user_table_dict)


@pytest.fixture()
def empty_table() -> TableInfo:
    return TableInfo(name="Empty", description="Nothing here")


@pytest.fixture()
def order_table() -> TableInfo:
    """Table using every coercion branch of the name indexer."""
    return TableInfo.model_validate({
        "name": "Order",
        "description": "Orders",
        "columns": [
            {"name": "ID", "type": "Int32"},
            {"name": "Total", "type": "Int64"},
            {"name": "Rate", "type": "Double"},
            {"name": "Paid", "type": "Boolean"},
            {"name": "CreateTime", "type": "DateTime"},
            {"name": "Amount", "type": "Decimal"},
            {"name": "Remark", "type": "String"},
            {"name": "Status", "type": "Int32", "properties": {"Type": "OrderStatus"}},
            {"name": "Code", "type": "Guid", "properties": {"Type": "System.Guid"}},
            {"name": "Extra", "type": "Object", "properties": {"Type": "Demo.Missing"}},
        ],
    })


@pytest.fixture()
def schema_dict(user_table_dict: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "options": {"namespace": "Demo.Data"},
        "enums": ["OrderStatus"],
        "tables": [
            user_table_dict,
            {
                "name": "Role",
                "description": "Roles",
                "columns": [
                    {"name": "ID", "type": "Int32"},
                    {"name": "Name", "type": "String"},
                ],
            },
        ],
    }


@pytest.fixture()
def schema(schema_dict: Dict[str, Any]) -> SchemaDefinition:
    data: Dict[str, Any] = {k: v for k, v in schema_dict.items() if k != "options"}
    return SchemaDefinition.model_validate(data)


@pytest.fixture()
def pure_option() -> BuilderOption:
    return BuilderOption(pure=True, usings=["System"])


# ---------------------------------------------------------------------------
# Model files on disk
# ---------------------------------------------------------------------------


@pytest.fixture()
def model_yaml_path(schema_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the model dict to a temporary YAML file and return its path."""
    path = tmp_path / "model.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(schema_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def model_xml_path(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "Shop.xml"
    path.write_text(
        textwrap.dedent(
            """\
            <?xml version="1.0" encoding="utf-8"?>
            <Tables Output="Entity" NameSpace="Demo.Shop" ConnName="Shop" BaseClass="Entity&lt;{name}&gt;">
              <Table Name="Product" Description="Products" DisplayName="Goods">
                <Columns>
                  <Column Name="ID" DataType="Int32" Description="Id" />
                  <Column Name="Title" DataType="String" Description="Title" DisplayName="Caption" Length="50" />
                  <Column Name="Kind" DataType="Int32" Type="ProductKinds" Description="Kind" />
                </Columns>
              </Table>
              <Table Name="Stock">
                <Columns>
                  <Column Name="ProductID" DataType="Int32" />
                  <Column Name="Count" DataType="Int64" />
                </Columns>
              </Table>
              <Enum Name="ProductKinds" />
            </Tables>
            """
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Return a fresh output directory path."""
    out = tmp_path / "output"
    out.mkdir(parents=True, exist_ok=True)
    return out

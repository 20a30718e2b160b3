"""
tests/test_loader.py
Unit tests for classgen.loader (model files → SchemaDefinition + options).
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict

import pytest

from classgen.loader import (
    ModelFileNotFoundError,
    find_model_file,
    load_model_file,
    load_models,
    parse_raw_model,
)
from classgen.models import BuilderOption, DataType


class TestFindModelFile:
    def test_finds_first_by_name(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "b.yaml").write_text("tables: []", encoding="utf-8")
        (tmp_path / "a.xml").write_text("<Tables />", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("", encoding="utf-8")
        assert find_model_file(tmp_path).name == "a.xml"

    def test_empty_directory_raises(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(ModelFileNotFoundError):
            find_model_file(tmp_path)


class TestLoadModelFile:
    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_model_file(tmp_path / "nope.xml")

    def test_xml_layout(self, model_xml_path: pathlib.Path) -> None:
        raw = load_model_file(model_xml_path)
        assert raw["attributes"]["NameSpace"] == "Demo.Shop"
        assert raw["enums"] == ["ProductKinds"]
        product = raw["tables"][0]
        assert product["name"] == "Product"
        assert product["display_name"] == "Goods"
        title = product["columns"][1]
        assert title["display_name"] == "Caption"
        assert title["properties"] == {"Length": "50"}
        assert product["columns"][2]["properties"] == {"Type": "ProductKinds"}

    def test_invalid_xml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.xml"
        path.write_text("<Tables>", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid XML"):
            load_model_file(path)

    def test_json(self, tmp_path: pathlib.Path, schema_dict: Dict[str, Any]) -> None:
        path = tmp_path / "model.json"
        path.write_text(json.dumps(schema_dict), encoding="utf-8")
        assert load_model_file(path)["tables"][0]["name"] == "User"

    def test_yaml_top_level_must_be_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_model_file(path)


class TestParseRawModel:
    def test_options_section_wins_over_attributes(self) -> None:
        raw = {
            "attributes": {"NameSpace": "FromAttr", "Output": "out"},
            "options": {"namespace": "FromOptions"},
            "tables": [],
        }
        schema, options = parse_raw_model(raw)
        assert options == {"namespace": "FromOptions", "output": "out"}
        assert schema.table_count == 0

    def test_option_keys_normalised_to_field_names(self) -> None:
        raw = {
            "attributes": {"BaseClass": "FromAttr"},
            "options": {"baseClass": "FromOptions", "ClassTemplate": "T{name}"},
        }
        _, options = parse_raw_model(raw)
        assert options == {"base_class": "FromOptions", "class_template": "T{name}"}

    def test_invalid_model_wrapped(self) -> None:
        raw = {"tables": [{"name": "T", "columns": [{"name": "A", "type": "Nope"}]}]}
        with pytest.raises(ValueError, match="Model validation failed"):
            parse_raw_model(raw)


class TestLoadModels:
    def test_xml(self, model_xml_path: pathlib.Path) -> None:
        schema, option = load_models(model_xml_path)
        assert [t.name for t in schema.tables] == ["Product", "Stock"]
        assert schema.enums == ["ProductKinds"]
        assert schema.source_file == str(model_xml_path.resolve())
        kind = schema.tables[0].get_column("Kind")
        assert kind is not None and kind.data_type is DataType.INT32
        assert option.namespace == "Demo.Shop"
        assert option.output == str(model_xml_path.resolve().parent / "Entity")
        assert option.conn_name == "Shop"
        assert option.base_class == "Entity<{name}>"

    def test_defaults_from_file_location(self, model_yaml_path: pathlib.Path) -> None:
        schema, option = load_models(model_yaml_path)
        assert schema.table_count == 2
        assert option.namespace == "Demo.Data"
        assert option.output == str(model_yaml_path.parent.resolve())

    def test_namespace_defaults_to_stem(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "Crm.yaml"
        path.write_text("tables: []\n", encoding="utf-8")
        _, option = load_models(path)
        assert option.namespace == "Crm"

    def test_base_option_is_layered(self, model_yaml_path: pathlib.Path) -> None:
        base = BuilderOption(extend=True, namespace="Ignored")
        _, option = load_models(model_yaml_path, base)
        assert option.extend is True
        assert option.namespace == "Demo.Data"

    def test_option_aliases_in_options_section(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "m.yaml"
        path.write_text(
            "options:\n"
            "  baseClass: Entity<{name}>\n"
            "  classNameTemplate: T{name}Entity\n"
            "  Output: gen\n"
            "  NameSpace: Demo.Alias\n"
            "tables: []\n",
            encoding="utf-8",
        )
        _, option = load_models(path)
        assert option.base_class == "Entity<{name}>"
        assert option.class_template == "T{name}Entity"
        assert option.output == str(tmp_path.resolve() / "gen")
        assert option.namespace == "Demo.Alias"

    def test_unknown_option_rejected(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "m.yaml"
        path.write_text("options: {colour: red}\ntables: []\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Option validation failed"):
            load_models(path)

    def test_searches_working_directory(
        self, model_xml_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(model_xml_path.parent)
        schema, _ = load_models()
        assert schema.source_file == str(model_xml_path.resolve())

    def test_search_without_model_file(
        self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ModelFileNotFoundError):
            load_models()

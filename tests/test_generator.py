"""
tests/test_generator.py
Integration tests for classgen.generator (entry points and the model-file
pipeline).

All I/O is performed in pytest's tmp_path directories.
"""

from __future__ import annotations

import pathlib

import pytest

from classgen.builder import ClassBuilder
from classgen.generator import (
    GenerationReport,
    build_interfaces,
    build_models,
    generate_from_file,
    generate_one,
)
from classgen.models import BuilderOption, SchemaDefinition, TableInfo


class TestGenerateOne:
    def test_returns_text_without_saving(
        self, user_table: TableInfo, output_dir: pathlib.Path
    ) -> None:
        text = generate_one(user_table, BuilderOption(output=str(output_dir)))
        assert "public class User" in text
        assert list(output_dir.iterdir()) == []

    def test_save(self, user_table: TableInfo, output_dir: pathlib.Path) -> None:
        text = generate_one(
            user_table, BuilderOption(output=str(output_dir)), save=True, ext=".txt"
        )
        assert (output_dir / "UserInfo.txt").read_text(encoding="utf-8") == text

    def test_matches_builder(self, user_table: TableInfo) -> None:
        opt = BuilderOption(extend=True)
        assert generate_one(user_table, opt) == ClassBuilder(user_table, opt).execute()


class TestBatches:
    def test_build_models_forces_pure(
        self, schema: SchemaDefinition, output_dir: pathlib.Path
    ) -> None:
        opt = BuilderOption(output=str(output_dir))
        count = build_models(schema.tables, opt)

        assert count == 2
        # class-name files, no display name
        user = (output_dir / "User.cs").read_text(encoding="utf-8")
        assert "[Serializable]" not in user
        assert "public class User" in user
        assert (output_dir / "Role.cs").exists()
        assert opt.pure is False

    def test_build_interfaces(
        self, schema: SchemaDefinition, output_dir: pathlib.Path
    ) -> None:
        count = build_interfaces(schema.tables, BuilderOption(output=str(output_dir)))
        assert count == 2
        assert "public interface IUser" in (output_dir / "IUser.cs").read_text(
            encoding="utf-8"
        )
        assert (output_dir / "IRole.cs").exists()

    def test_batch_runs_are_isolated(self, output_dir: pathlib.Path) -> None:
        tables = [
            TableInfo.model_validate({"name": "A", "columns": [{"name": "Alpha", "type": "Int32"}]}),
            TableInfo.model_validate({"name": "B", "columns": [{"name": "Beta", "type": "Int32"}]}),
        ]
        build_models(tables, BuilderOption(output=str(output_dir), base_class="Base<{name}>"))
        a = (output_dir / "A.cs").read_text(encoding="utf-8")
        b = (output_dir / "B.cs").read_text(encoding="utf-8")
        assert "public class A : Base<A>" in a and "Beta" not in a
        assert "public class B : Base<B>" in b and "Alpha" not in b

    def test_empty_batch(self, output_dir: pathlib.Path) -> None:
        assert build_models([], BuilderOption(output=str(output_dir))) == 0


class TestGenerateFromFile:
    def test_xml_pipeline(self, model_xml_path: pathlib.Path) -> None:
        report = generate_from_file(model_xml_path, use_display_name=True)

        assert report.success, report.summary()
        assert report.tables_processed == 2
        assert report.files_written == 2
        entity = model_xml_path.parent / "Entity"
        product = (entity / "Goods.cs").read_text(encoding="utf-8")
        assert "namespace Demo.Shop" in product
        assert "public class Product : Entity<Product>" in product
        assert "public ProductKinds Kind { get; set; }" in product
        assert (entity / "Stock.cs").exists()
        assert report.output_directory == str(entity.resolve())

    def test_overrides_and_extend(self, model_yaml_path: pathlib.Path) -> None:
        out = model_yaml_path.parent / "gen"
        report = generate_from_file(
            model_yaml_path,
            overrides={"output": str(out), "extend": True, "namespace": "Other"},
        )
        assert report.success
        text = (out / "User.cs").read_text(encoding="utf-8")
        assert "namespace Other" in text
        assert 'case "Enable": Enable = value.ToBoolean(); break;' in text

    def test_extra_usings_layer_on_model_usings(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "m.yaml"
        path.write_text(
            "options: {usings: [System, Demo.Common]}\n"
            "tables:\n  - name: T\n    columns:\n      - {name: Alpha, type: Int32}\n",
            encoding="utf-8",
        )
        report = generate_from_file(
            path, overrides={"pure": True}, extra_usings=["Acme.Core"], write=False
        )
        assert report.texts["T"].startswith(
            "using System;\nusing Acme.Core;\nusing Demo.Common;\n\n"
        )

    def test_batch_forces_pure(self, model_yaml_path: pathlib.Path) -> None:
        report = generate_from_file(model_yaml_path, batch=True, use_display_name=True)
        assert report.success
        user = model_yaml_path.parent / "User.cs"
        assert user.exists()
        assert "[DataObject]" not in user.read_text(encoding="utf-8")

    def test_print_mode_writes_nothing(self, model_yaml_path: pathlib.Path) -> None:
        before = set(model_yaml_path.parent.iterdir())
        report = generate_from_file(model_yaml_path, write=False)
        assert set(model_yaml_path.parent.iterdir()) == before
        assert set(report.texts) == {"User", "Role"}
        assert report.files_written == 0

    def test_no_overwrite_counts_skipped(self, model_yaml_path: pathlib.Path) -> None:
        existing = model_yaml_path.parent / "Role.cs"
        existing.write_text("// keep\n", encoding="utf-8")
        report = generate_from_file(model_yaml_path, overwrite=False)
        assert report.files_written == 1
        assert report.files_skipped == 1
        assert existing.read_text(encoding="utf-8") == "// keep\n"
        assert str(existing.resolve()) in report.paths

    def test_missing_file_is_input_error(self, tmp_path: pathlib.Path) -> None:
        report = generate_from_file(tmp_path / "missing.xml")
        assert not report.success
        assert len(report.input_errors) == 1
        assert report.tables_processed == 0

    def test_export_error_is_isolated(self, model_yaml_path: pathlib.Path) -> None:
        blocker = model_yaml_path.parent / "blocker"
        blocker.write_text("", encoding="utf-8")
        report = generate_from_file(model_yaml_path, overrides={"output": str(blocker)})
        assert len(report.export_errors) == 2
        assert report.tables_processed == 2
        assert not report.success

    def test_warnings_collected(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "m.yaml"
        path.write_text(
            "options: {extend: true}\n"
            "tables:\n"
            "  - name: T\n"
            "    columns:\n"
            "      - {name: class, type: Int32}\n"
            "      - {name: K, type: Int32, properties: {Type: Missing}}\n",
            encoding="utf-8",
        )
        report = generate_from_file(path, write=False)
        assert report.success
        assert len(report.warnings) == 1
        assert report.warnings[0].startswith("T: ")
        assert len(report.validation_warnings) == 2

    def test_summary(self, model_yaml_path: pathlib.Path) -> None:
        report = generate_from_file(model_yaml_path)
        text = report.summary()
        assert "ClassGen - Generation Report" in text
        assert "SUCCESS" in text
        assert "Files written:    2" in text


class TestGenerationReport:
    def test_default_is_success(self) -> None:
        assert GenerationReport().success

    @pytest.mark.parametrize("field_name", ["input_errors", "generation_errors", "export_errors"])
    def test_any_error_fails(self, field_name: str) -> None:
        report = GenerationReport()
        getattr(report, field_name).append("boom")
        assert not report.success
        assert "boom" in report.summary()

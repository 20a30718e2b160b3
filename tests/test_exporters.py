"""
tests/test_exporters.py
Unit tests for classgen.exporters (file naming and overwrite policy).
"""

from __future__ import annotations

import pathlib

import pytest

from classgen.builder import ClassBuilder
from classgen.exporters import (
    file_base_name,
    normalise_extension,
    resolve_output_path,
    save_text,
)
from classgen.models import BuilderOption, TableInfo


class TestNaming:
    @pytest.mark.parametrize(
        "ext, expected",
        [
            (None, ".cs"),
            ("", ".cs"),
            (".cs", ".cs"),
            (".txt", ".txt"),
            ("Biz", "Biz.cs"),
        ],
    )
    def test_normalise_extension(self, ext, expected) -> None:
        assert normalise_extension(ext) == expected

    def test_class_uses_display_name(self, user_table: TableInfo) -> None:
        assert file_base_name(user_table, "User", BuilderOption()) == "UserInfo"

    def test_display_name_can_be_disabled(self, user_table: TableInfo) -> None:
        name = file_base_name(user_table, "User", BuilderOption(), use_display_name=False)
        assert name == "User"

    def test_interface_uses_class_name(self, user_table: TableInfo) -> None:
        opt = BuilderOption(interface=True)
        assert file_base_name(user_table, "IUser", opt) == "IUser"

    def test_resolve_output_path(self, user_table: TableInfo, tmp_path: pathlib.Path) -> None:
        opt = BuilderOption(output=str(tmp_path / "Entity"))
        path = resolve_output_path(user_table, "User", opt, ext="Biz")
        assert path == (tmp_path / "Entity" / "UserInfoBiz.cs").resolve()
        assert path.is_absolute()


class TestSaveText:
    def test_creates_directory(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "a" / "b" / "X.cs"
        assert save_text(target, "x\n") is True
        assert target.read_text(encoding="utf-8") == "x\n"

    def test_overwrite(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "X.cs"
        target.write_text("old", encoding="utf-8")
        assert save_text(target, "new", overwrite=True) is True
        assert target.read_text(encoding="utf-8") == "new"

    def test_keep_existing(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "X.cs"
        target.write_text("old", encoding="utf-8")
        assert save_text(target, "new", overwrite=False) is False
        assert target.read_text(encoding="utf-8") == "old"


class TestBuilderSave:
    def test_save_writes_text(self, user_table: TableInfo, output_dir: pathlib.Path) -> None:
        builder = ClassBuilder(user_table, BuilderOption(output=str(output_dir)))
        text = builder.execute()
        path = builder.save()
        assert path == (output_dir / "UserInfo.cs").resolve()
        assert path.read_text(encoding="utf-8") == text

    def test_no_overwrite_keeps_file_and_returns_same_path(
        self, user_table: TableInfo, output_dir: pathlib.Path
    ) -> None:
        existing = output_dir / "User.cs"
        existing.write_text("// hand edited\n", encoding="utf-8")

        builder = ClassBuilder(user_table, BuilderOption(output=str(output_dir)))
        builder.execute()
        path = builder.save(overwrite=False, use_display_name=False)

        assert path == existing.resolve()
        assert existing.read_text(encoding="utf-8") == "// hand edited\n"

    def test_unwritable_target_raises(
        self, user_table: TableInfo, output_dir: pathlib.Path
    ) -> None:
        # a plain file where the output directory should be
        blocker = output_dir / "blocker"
        blocker.write_text("", encoding="utf-8")
        builder = ClassBuilder(user_table, BuilderOption(output=str(blocker)))
        builder.execute()
        with pytest.raises(OSError):
            builder.save(use_display_name=False)

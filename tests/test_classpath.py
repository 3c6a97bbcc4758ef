"""Tests for classpath lookup."""

import os
import zipfile

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pyjcf.classpath import ClassPath

from classbuilder import ClassBuilder


def write_class(root: Path, internal_name: str) -> Path:
    path = root / (internal_name + ".class")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(ClassBuilder(internal_name).to_bytes())
    return path


class TestClassPath:
    def test_directory(self, tmp_path):
        write_class(tmp_path, "com/example/Foo")
        with ClassPath() as classpath:
            classpath.add_path(tmp_path)
            info = classpath.find_class("com/example/Foo")
            assert info is not None
            assert info.name == "com/example/Foo"

    def test_jar(self, tmp_path):
        jar_path = tmp_path / "lib.jar"
        with zipfile.ZipFile(jar_path, "w") as zf:
            zf.writestr("org/example/Bar.class", ClassBuilder("org/example/Bar").to_bytes())
        with ClassPath() as classpath:
            classpath.add_path(str(jar_path))
            assert classpath.find_class("org/example/Bar").name == "org/example/Bar"
            assert classpath.find_class("org/example/Missing") is None

    def test_first_entry_wins(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        write_class(first, "A")
        builder = ClassBuilder("A", version=(50, 0))
        (second / "A.class").parent.mkdir(parents=True)
        (second / "A.class").write_bytes(builder.to_bytes())
        with ClassPath() as classpath:
            classpath.add_path(first)
            classpath.add_path(second)
            assert classpath.find_class("A").major_version == 52

    def test_cached(self, tmp_path):
        path = write_class(tmp_path, "A")
        with ClassPath() as classpath:
            classpath.add_path(tmp_path)
            first = classpath.find_class("A")
            path.unlink()
            assert classpath.find_class("A") is first

    def test_not_found(self, tmp_path):
        with ClassPath() as classpath:
            classpath.add_path(tmp_path)
            assert classpath.find_class("does/not/Exist") is None

    def test_invalid_entry(self, tmp_path):
        classpath = ClassPath()
        with pytest.raises(ValueError):
            classpath.add_path(tmp_path / "missing-dir")

    def test_invalid_archive_name(self, tmp_path):
        with pytest.raises(ValueError):
            ClassPath([tmp_path / "missing.jar"])

    def test_from_string(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        write_class(second, "B")
        classpath = ClassPath.from_string(os.pathsep.join([str(first), "", str(second)]))
        assert classpath.entries == [first, second]
        assert "B" in classpath
        assert "C" not in classpath

    def test_invalid_class_file_skipped(self, tmp_path):
        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / "A.class").write_bytes(b"\x00\x00\x00\x00not a class")
        good = tmp_path / "good"
        write_class(good, "A")
        with ClassPath([broken, good]) as classpath:
            info = classpath.find_class("A")
            assert info is not None
            assert info.valid
            assert info.name == "A"

    def test_invalid_class_file_not_cached(self, tmp_path):
        path = tmp_path / "A.class"
        path.write_bytes(b"\xde\xad\xbe\xef")
        with ClassPath([tmp_path]) as classpath:
            assert classpath.find_class("A") is None
            write_class(tmp_path, "A")
            info = classpath.find_class("A")
            assert info is not None
            assert info.valid

    def test_close_releases_archives(self, tmp_path):
        jar_path = tmp_path / "lib.zip"
        with zipfile.ZipFile(jar_path, "w") as zf:
            zf.writestr("A.class", ClassBuilder("A").to_bytes())
        classpath = ClassPath([tmp_path, jar_path])
        classpath.close()
        assert classpath.entries == [tmp_path]

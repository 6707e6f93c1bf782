"""Tests for test discovery."""

from pathlib import Path

from vm_test_runner.discovery import create_test_run, find_tests, package_root


def write_source(root: Path, relative: str, package: str | None) -> Path:
    """Write a minimal Java source file."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    header = f"package {package};\n\n" if package else ""
    path.write_text(f"{header}public class {path.stem} {{}}\n")
    return path


def test_qualified_name_from_package(tmp_path: Path) -> None:
    """Qualified name combines the declared package and the file name."""
    source = write_source(tmp_path, "com/example/FooTest.java", "com.example")

    test_run = create_test_run(source)

    assert test_run.qualified_name == "com.example.FooTest"
    assert test_run.test_class == "FooTest"
    assert test_run.test_java == source
    assert test_run.test_directory == tmp_path


def test_default_package(tmp_path: Path) -> None:
    """Sources without a package use the bare class name."""
    source = write_source(tmp_path, "FooTest.java", None)

    test_run = create_test_run(source)

    assert test_run.qualified_name == "FooTest"
    assert test_run.test_directory == tmp_path


def test_non_java_file_is_kept(tmp_path: Path) -> None:
    """Files that are not Java sources still become test runs."""
    source = tmp_path / "Foo.txt"
    source.write_text("package nope;")

    (test_run,) = find_tests([source])

    assert test_run.qualified_name == "Foo"


def test_directories_are_searched_recursively(tmp_path: Path) -> None:
    """Every Java source below a directory is found, in sorted order."""
    write_source(tmp_path, "b/BTest.java", "b")
    write_source(tmp_path, "a/ATest.java", "a")
    (tmp_path / "a" / "notes.txt").write_text("ignored")

    test_runs = find_tests([tmp_path])

    assert [t.qualified_name for t in test_runs] == ["a.ATest", "b.BTest"]


def test_package_root_falls_back_to_own_directory(tmp_path: Path) -> None:
    """A source outside its package tree compiles from its own directory."""
    source = tmp_path / "elsewhere" / "FooTest.java"

    assert package_root(source, "com.example") == tmp_path / "elsewhere"

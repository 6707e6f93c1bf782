"""Tests for the generated properties record."""

from pathlib import Path

from vm_test_runner import properties


def read_entries(path: Path) -> list[str]:
    """Non-comment lines of a properties file."""
    return [
        line
        for line in path.read_text(encoding="latin-1").splitlines()
        if not line.startswith("#")
    ]


def test_writes_fixed_file_name(tmp_path: Path) -> None:
    """The record is written to test.properties in the given directory."""
    path = properties.write_properties(
        tmp_path,
        {properties.TEST_CLASS: "FooTest", properties.QUALIFIED_NAME: "a.FooTest"},
        comment="generated by tests",
    )

    assert path == tmp_path / "test.properties"
    assert read_entries(path) == ["testClass=FooTest", "qualifiedName=a.FooTest"]


def test_first_lines_are_comments(tmp_path: Path) -> None:
    """The comment and timestamp come first."""
    path = properties.write_properties(tmp_path, {}, comment="generated by tests")

    lines = path.read_text(encoding="latin-1").splitlines()
    assert lines[0] == "#generated by tests"
    assert lines[1].startswith("#")


def test_escapes_special_characters(tmp_path: Path) -> None:
    """Separators, whitespace and non-ASCII text are escaped Java style."""
    path = properties.write_properties(
        tmp_path,
        {"a key": "x=y:z", "multi": "one\ntwo", "name": " café\\"},
        comment="c",
    )

    assert read_entries(path) == [
        "a\\ key=x\\=y\\:z",
        "multi=one\\ntwo",
        "name=\\ caf\\u00E9\\\\",
    ]


def test_escapes_supplementary_characters_as_surrogate_pairs(tmp_path: Path) -> None:
    """Characters beyond U+FFFF are written as two UTF-16 escapes."""
    path = properties.write_properties(tmp_path, {"mood": "ok 😀"}, comment="c")

    assert read_entries(path) == ["mood=ok \\uD83D\\uDE00"]


def test_escapes_control_characters(tmp_path: Path) -> None:
    """Control characters without a short escape use the unicode form."""
    path = properties.write_properties(tmp_path, {"bell": "a\x07b"}, comment="c")

    assert read_entries(path) == ["bell=a\\u0007b"]

"""Generated properties record read by the test runner at execution time."""

from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path

FILE = "test.properties"
TEST_CLASS = "testClass"
QUALIFIED_NAME = "qualifiedName"

# Must be the last line a test program prints for the run to count as passed.
RESULT_SUCCESS = "All tests passed!"

_SPECIAL = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\f": "\\f"}


def _escape(text: str, *, is_key: bool) -> str:
    escaped: list[str] = []
    for index, char in enumerate(text):
        if char in _SPECIAL:
            escaped.append(_SPECIAL[char])
        elif char in "=:#!" or (char == " " and (is_key or index == 0)):
            escaped.append("\\" + char)
        elif not " " <= char <= "~":
            # Outside the Basic Multilingual Plane this yields a surrogate pair.
            encoded = char.encode("utf-16-be", "surrogatepass")
            escaped.extend(
                f"\\u{int.from_bytes(encoded[i : i + 2]):04X}"
                for i in range(0, len(encoded), 2)
            )
        else:
            escaped.append(char)
    return "".join(escaped)


def write_properties(
    directory: Path, properties: Mapping[str, str], comment: str
) -> Path:
    """Write ``properties`` to ``directory/test.properties`` in Java format.

    Returns:
        Path of the written file

    """
    lines = [f"#{comment}", f"#{datetime.now(timezone.utc):%a %b %d %H:%M:%S %Z %Y}"]
    lines.extend(
        f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}"
        for key, value in properties.items()
    )
    path = directory / FILE
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")
    return path

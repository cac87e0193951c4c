from __future__ import annotations

from pathlib import Path
from typing import Callable, Union

import pytest

SYMBOL_SAMPLE = "// comment\n\nfunction foo() {\n  return 1;\n}\n\nfunction bar() {\n  return 2;\n}"

FileWriter = Callable[[str, Union[str, bytes]], Path]


@pytest.fixture
def write_file(tmp_path: Path) -> FileWriter:
    """Write text or raw bytes below tmp_path and return the file path."""

    def _write(relative: str, content: Union[str, bytes]) -> Path:
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_bytes(content.encode("utf-8"))
        return target

    return _write


@pytest.fixture
def symbol_sample() -> str:
    return SYMBOL_SAMPLE

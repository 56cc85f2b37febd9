"""File writes that never leave a partially written document behind."""

import json
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO


def atomic_write(path: Path | str, write_func: Callable[[TextIO], None]) -> None:
    """Write a text file through a temp file in the same directory, then rename.

    Args:
        path: Destination file path
        write_func: Called with an open text handle to write the content

    The temp file gets a unique name, so concurrent writers to the same
    directory do not clobber each other's partial output; the last rename wins.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            write_func(f)
        tmp_path.replace(path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """Atomically write ``data`` as UTF-8 JSON (non-ASCII kept as-is).

    Example:
        atomic_write_json("output/issues/42.json", document.to_dict())
    """
    atomic_write(path, lambda f: json.dump(data, f, indent=indent, ensure_ascii=False))

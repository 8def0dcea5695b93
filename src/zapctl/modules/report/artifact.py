"""Atomic persistence of the rendered scan report."""

import os
import tempfile
from pathlib import Path


def write_artifact(path: Path, content: bytes) -> Path:
    """Write ``content`` to ``path`` without ever leaving a partial file.

    The bytes go to a temporary file in the destination directory which is then
    renamed over ``path``.
    """
    path = Path(path)
    directory = path.parent if str(path.parent) else Path(".")
    directory.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path

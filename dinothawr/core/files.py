# dinothawr/core/files.py
from __future__ import annotations
import os
from pathlib import Path

__all__ = ["atomicWriteBytes", "atomicWriteText"]



def atomicWriteBytes(path: Path, data: bytes) -> None:
    """
    Writes `data` to `path` through a sibling temp file: write, flush, fsync, close, replace.

    Readers never observe a half-written file. On failure the temp file is removed
    and the original OSError propagates.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with tmp.open("wb") as file:
            file.write(data)
            file.flush()
            os.fsync(file.fileno())
        os.replace(tmp, path)
    except OSError:
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            pass
        raise



def atomicWriteText(path: Path, text: str, encoding: str = "utf-8") -> None:
    atomicWriteBytes(path, text.encode(encoding))

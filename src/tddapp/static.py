# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Static assets served from an injectable file system.

Any object with ``response(path)`` (raising FileNotFoundError) can back the
handler, which keeps tests free of real directories. On disk, lookups go
through Starlette's StaticFiles.
"""

from __future__ import annotations

import mimetypes
import stat
from pathlib import Path, PurePosixPath
from typing import Dict, Mapping, Optional, Protocol

from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"


class StaticFS(Protocol):
    def response(self, path: str) -> Response:
        ...


def clean_path(path: str) -> Optional[str]:
    """Normalise a request path to a relative POSIX path, or None if it escapes the root."""
    p = PurePosixPath((path or "").lstrip("/"))
    if not p.parts or ".." in p.parts:
        return None
    return p.as_posix()


class DirectoryFS:
    def __init__(self, root: Path):
        self.root = Path(root)
        self.files = StaticFiles(directory=str(self.root))

    def response(self, path: str) -> FileResponse:
        rel = clean_path(path)
        if rel is None:
            raise FileNotFoundError(path)
        try:
            full_path, stat_result = self.files.lookup_path(rel)
        except (OSError, ValueError):
            # name too long, embedded NUL byte
            raise FileNotFoundError(path) from None
        if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
            raise FileNotFoundError(path)
        return FileResponse(full_path, stat_result=stat_result)


class MemoryFS:
    def __init__(self, files: Optional[Mapping[str, Optional[bytes]]] = None):
        self.files: Dict[str, bytes] = {}
        for name, content in (files or {}).items():
            rel = clean_path(name)
            if rel:
                self.files[rel] = content or b""

    def read(self, path: str) -> bytes:
        rel = clean_path(path)
        if rel is None or rel not in self.files:
            raise FileNotFoundError(path)
        return self.files[rel]

    def response(self, path: str) -> Response:
        ctype, _ = mimetypes.guess_type(path)
        return Response(self.read(path), media_type=ctype or "application/octet-stream")


def default_fs() -> DirectoryFS:
    return DirectoryFS(PUBLIC_DIR)

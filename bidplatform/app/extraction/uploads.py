"""Spool multipart uploads to per-request temporary files."""

import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile


@dataclass(frozen=True)
class UploadedFile:
    """A spooled upload awaiting text extraction."""

    path: Path
    filename: str
    media_type: str | None


def save_upload(upload: UploadFile, upload_dir: str) -> UploadedFile:
    """Copy an upload into ``upload_dir`` under a unique name.

    The caller owns the returned file; text extraction deletes it.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(dir=directory, delete=False) as tmp:
        shutil.copyfileobj(upload.file, tmp)

    return UploadedFile(
        path=Path(tmp.name),
        filename=upload.filename or "",
        media_type=upload.content_type,
    )

"""Hierarchical file store collaborator.

The share is a directory under a mounted root: an EFS mount point in the aws
modes, the local storage directory in local-dev. Files are addressed by name
and a second upload with the same name replaces the first.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, List

from storage_gateway.adapters.base import FileShare, call_backend
from storage_gateway.config.settings import CONTRACT_SHARE_NAME
from storage_gateway.schemas import ShareEntry

logger = logging.getLogger(__name__)


class MountedFileShare(FileShare):
    """Handles a file share rooted at ``<share_root>/<share_name>``."""

    def __init__(self, share_root: str, share_name: str = CONTRACT_SHARE_NAME):
        self.root = Path(share_root) / share_name
        self.name = share_name
        logger.info("MountedFileShare initialized at: %s", self.root)

    def _create_dir(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _write(self, file_name: str, stream: BinaryIO) -> None:
        if Path(file_name).name != file_name or file_name in (".", ".."):
            raise ValueError(f"File name must not contain path separators: {file_name!r}")

        # Write next to the target then swap it in, so a reader never sees a half-written file
        fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as f:
                shutil.copyfileobj(stream, f)
            os.replace(tmp_path, self.root / file_name)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _list(self) -> List[ShareEntry]:
        return [
            ShareEntry(name=p.name, is_directory=p.is_dir())
            for p in sorted(self.root.iterdir(), key=lambda p: p.name)
            if not p.name.startswith(".upload-")
        ]

    async def create_if_not_exists(self) -> None:
        await call_backend("create share", self._create_dir)

    async def upload(self, file_name: str, stream: BinaryIO, length: int) -> None:
        await call_backend("upload share file", self._write, file_name, stream)
        logger.info(f"Wrote {length} bytes to {self.root / file_name}")

    async def list_entries(self) -> List[ShareEntry]:
        return await call_backend("list share", self._list)

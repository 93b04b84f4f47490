"""
Local File Store — reads and writes JSON documents in a local directory.
This is the durable copy of the dataset: write failures here are fatal.
"""

import os
import tempfile
from typing import Optional

from tools.errors import DirectoryMissing, LocalStoreError


class LocalFileStore:
    """
    Document store backed by files in `base_dir`.

    When `ephemeral` is set the directory is a platform scratch area
    (e.g. /tmp on serverless hosts) and is assumed to exist.
    """

    name = "local"

    def __init__(self, base_dir: str, ephemeral: bool = False):
        self.base_dir = base_dir
        self.ephemeral = ephemeral

    def path_for(self, key: str) -> str:
        return os.path.join(self.base_dir, key)

    def read(self, key: str) -> Optional[str]:
        """Return the file contents, or None when the file does not exist."""
        path = self.path_for(key)
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LocalStoreError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, content: str) -> None:
        """
        Write a document atomically.

        Raises:
            DirectoryMissing: If the output directory does not exist.
            LocalStoreError: If the file cannot be written.
        """
        if not self.ephemeral and not os.path.isdir(self.base_dir):
            raise DirectoryMissing(f"Output directory does not exist: {self.base_dir}")

        path = self.path_for(key)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise LocalStoreError(f"Failed to write {path}: {e}") from e

        print(f"[LocalStore] 💾 Wrote {path}")

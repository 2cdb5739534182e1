"""Storage abstraction over fsspec for the dataset files."""

from pathlib import Path

import fsspec
from fsspec.core import split_protocol


class StorageBackend:
    """Opens dataset files through fsspec, whatever filesystem they live on.

    Plain paths are resolved on the local disk.  A URL such as
    ``gs://bucket/samples.json`` or ``memory://samples.json`` is handed to
    the fsspec implementation registered for its protocol (``gcs`` needs
    the optional ``gcsfs`` extra).  Filesystem instances are created
    lazily and cached per protocol.
    """

    def __init__(self) -> None:
        self._filesystems: dict[str, fsspec.AbstractFileSystem] = {}

    def _get_fs(self, path: str) -> tuple[fsspec.AbstractFileSystem, str]:
        """Resolve the fsspec filesystem and normalised path for *path*."""
        protocol, _ = split_protocol(path)
        if protocol is None:
            protocol = "file"
            path = str(Path(path).resolve())

        if protocol not in self._filesystems:
            self._filesystems[protocol] = fsspec.filesystem(protocol)

        return self._filesystems[protocol], path

    def exists(self, path: str) -> bool:
        """Return ``True`` if *path* exists on the resolved filesystem."""
        fs, norm_path = self._get_fs(path)
        return fs.exists(norm_path)

    def open(self, path: str, mode: str = "rb"):
        """Return an open file-like object for *path*."""
        fs, norm_path = self._get_fs(path)
        return fs.open(norm_path, mode)

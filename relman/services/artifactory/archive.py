"""Pack a manifest's artifacts into one in-memory tar.

Each artifact lands at ``<publish prefix>/<name>``; the repository explodes
the archive on upload using exactly these paths.
"""

from __future__ import annotations

import hashlib
import io
import tarfile

from relman.core.result import Err, Ok, Result
from relman.services.artifactory.errors import ArchiveStale, ArtifactUnreadable
from relman.services.artifactory.manifest import BuildManifest


def archive_path(publish_prefix: str, name: str) -> str:
    return f"{publish_prefix.strip('/')}/{name}"


def build_archive(manifest: BuildManifest) -> Result[bytes, ArchiveStale | ArtifactUnreadable]:
    """Return the tar bytes for every artifact in ``manifest``.

    Files are re-read and checked against the sha1 recorded at discovery;
    a mismatch is ArchiveStale.
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for module, artifact in manifest.artifacts():
            path = artifact.source_path
            try:
                data = path.read_bytes()
            except OSError as e:
                return Err(ArtifactUnreadable(path=path, reason=e.strerror or str(e)))

            if hashlib.sha1(data).hexdigest() != artifact.sha1:
                return Err(ArchiveStale(path=path))

            info = tarfile.TarInfo(name=archive_path(module.publish_prefix, artifact.name))
            info.size = len(data)
            info.mode = 0o644
            try:
                info.mtime = int(path.stat().st_mtime)
            except OSError:
                info.mtime = 0
            tar.addfile(info, io.BytesIO(data))

    return Ok(buffer.getvalue())

"""SHA-256 digests used by install-state fingerprints."""

import hashlib
from pathlib import Path

CHUNK_SIZE = 64 * 1024


def compute_sha256_file(file_path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Return the hex SHA-256 of ``file_path``, read in ``chunk_size`` blocks.

    Raises:
        FileNotFoundError: If file does not exist
    """
    digest = hashlib.sha256()
    with open(file_path, "rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def digest_optional_file(file_path: Path | None) -> str | None:
    """Digest ``file_path`` if it is given and exists, else ``None``."""
    if file_path is None or not file_path.is_file():
        return None
    return compute_sha256_file(file_path)

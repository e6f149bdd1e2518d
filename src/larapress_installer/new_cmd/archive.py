"""Temporary archive handling: naming, extraction and cleanup."""

import hashlib
import os
import time
import uuid
import zipfile
import zlib

from larapress_installer.errors import ExtractError


def make_archive_filename(working_dir) -> str:
    """Return a collision-resistant path for a downloaded archive."""
    seed = f"{time.time()}{uuid.uuid4().hex}".encode()
    return os.path.join(str(working_dir), f"larapress_{hashlib.md5(seed).hexdigest()}.zip")


def write_archive(archive_path, content: bytes) -> None:
    try:
        with open(archive_path, "wb") as f:
            f.write(content)
    except OSError as e:
        raise ExtractError("Unable to save release archive", archive_path, e) from e


def extract_archive(archive_path, destination) -> None:
    """Extract ``archive_path`` into ``destination``, creating it if needed.

    Raises:
        ExtractError: If the archive is corrupt or the filesystem refuses
            the write. Files already extracted are left in place.
    """
    try:
        os.makedirs(destination, exist_ok=True)
        with zipfile.ZipFile(archive_path, "r") as archive:
            archive.extractall(destination)
    except (OSError, EOFError, zipfile.BadZipFile, zlib.error) as e:
        raise ExtractError("Unable to extract release archive", archive_path, e) from e
    except (RuntimeError, NotImplementedError) as e:
        raise ExtractError("Unsupported release archive", archive_path, e) from e


def remove_archive(archive_path) -> None:
    """Remove a downloaded archive, ignoring any failure."""
    try:
        os.chmod(archive_path, 0o777)
    except OSError:
        pass
    try:
        os.unlink(archive_path)
    except OSError:
        pass

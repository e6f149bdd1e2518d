"""Permission helpers for the directories the application writes to."""

import os

WRITABLE_DIRECTORIES = ("bootstrap/cache", "storage")
WRITABLE_MODE = 0o775


def chmod_tree(path, mode: int) -> None:
    """Apply ``mode`` to ``path`` and everything beneath it.

    Raises:
        OSError: If ``path`` is missing or any entry cannot be changed.
    """
    os.chmod(path, mode)
    for root, dirs, files in os.walk(path):
        for name in dirs + files:
            entry = os.path.join(root, name)
            if not os.path.islink(entry):
                os.chmod(entry, mode)

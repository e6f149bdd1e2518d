"""EnvFileMerger: rewrites KEY=VALUE lines of a .env file in place."""

import re
from typing import Mapping

from larapress_installer.errors import EnvReadError, WriteError


class EnvFileMerger:
    """Owns load/update/publish of a line-oriented environment file.

    Only lines whose current value starts with a lowercase ASCII letter are
    replaced. A key whose value is empty, numeric or capitalised is left alone
    and nothing is appended for keys that are not present at all. Existing
    skeletons rely on this, so it is kept as-is.
    """

    def __init__(self, path: str, text: str):
        self._path = str(path)
        self._text = text

    @classmethod
    def load(cls, path) -> "EnvFileMerger":
        """Read the raw text of the environment file at ``path``."""
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise EnvReadError("Unable to read environment file", path, e) from e
        return cls(path, text)

    @property
    def path(self) -> str:
        return self._path

    @property
    def text(self) -> str:
        return self._text

    def set_key(self, key: str, value: str) -> "EnvFileMerger":
        pattern = re.compile(rf"^{re.escape(key)}=[a-z][^\r\n]*", re.MULTILINE)
        replacement = f"{key}={value}"
        self._text = pattern.sub(lambda _match: replacement, self._text)
        return self

    def update_all(self, values: Mapping[str, str]) -> "EnvFileMerger":
        """Apply ``set_key`` for each pair, in the order supplied."""
        for key, value in values.items():
            self.set_key(key, value)
        return self

    def publish(self, path=None) -> None:
        target = str(path) if path is not None else self._path
        try:
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(self._text)
        except OSError as e:
            raise WriteError("Unable to write environment file", target, e) from e

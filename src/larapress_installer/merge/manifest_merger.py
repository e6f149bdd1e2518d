"""ManifestMerger: merges settings into a project's composer.json."""

import json
import os
import shutil
import tempfile
from typing import Any, Dict, Mapping

from larapress_installer.errors import ManifestParseError, WriteError


class ManifestMerger:
    """Owns load/merge/publish of a JSON dependency manifest.

    Merges are shallow: a patch value replaces the existing value for the same
    key, even when both are mappings. After each merge the section's keys are
    sorted, mirroring how Composer itself orders ``require`` entries.
    """

    def __init__(self, path: str, document: Dict[str, Any]):
        self._path = str(path)
        self._document = document

    @classmethod
    def load(cls, path) -> "ManifestMerger":
        """Read and parse the manifest at ``path``."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise ManifestParseError("Unable to read composer manifest", path, e) from e

        if not isinstance(document, dict):
            raise ManifestParseError("Composer manifest must be a JSON object", path)

        return cls(path, document)

    @property
    def path(self) -> str:
        return self._path

    @property
    def document(self) -> Dict[str, Any]:
        return self._document

    def merge_section(self, section_name: str, patch: Mapping[str, Any]) -> "ManifestMerger":
        """Merge ``patch`` into a top-level section, patch winning on conflict."""
        section = self._document.get(section_name)
        if section is None or section == []:  # empty sections are often written as []
            section = {}
        elif not isinstance(section, dict):
            raise ManifestParseError(
                f"Section '{section_name}' is not a JSON object", self._path,
            )

        merged = {**section, **patch}
        self._document[section_name] = {key: merged[key] for key in sorted(merged)}
        return self

    def merge_sections(self, patches: Mapping[str, Mapping[str, Any]]) -> "ManifestMerger":
        for section_name, patch in patches.items():
            self.merge_section(section_name, patch)
        return self

    def publish(self, path=None) -> None:
        """Write the document back, replacing the target file atomically."""
        target = str(path) if path is not None else self._path
        content = json.dumps(self._document, indent=4, ensure_ascii=False) + "\n"

        directory = os.path.dirname(os.path.abspath(target))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory,
                prefix=".composer.", suffix=".tmp", delete=False,
            ) as f:
                tmp_path = f.name
                f.write(content)
            _copy_mode(target, tmp_path)
            os.replace(tmp_path, target)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise WriteError("Unable to write composer manifest", target, e) from e


def _copy_mode(target, tmp_path):
    """Give the replacement file the permissions of the file it replaces."""
    if os.path.exists(target):
        shutil.copymode(target, tmp_path)
    else:
        os.chmod(tmp_path, 0o644)

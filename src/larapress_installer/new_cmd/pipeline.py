"""ScaffoldPipeline: creates a new application from a release archive.

Stages run strictly in order. Each stage returns a StageResult; the first
result carrying an error moves the pipeline to FAILED and stops it. Files
already written stay on disk so a half-finished application can be inspected
or repaired by hand.
"""

import copy
import enum
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import click

from larapress_installer.errors import (
    DelegatedProcessFailure,
    EnvReadError,
    FetchError,
    PermissionWarning,
    ScaffoldError,
    TargetExistsError,
    WriteError,
)
from larapress_installer.merge.env_file_merger import EnvFileMerger
from larapress_installer.merge.manifest_merger import ManifestMerger
from larapress_installer.new_cmd.archive import (
    extract_archive,
    make_archive_filename,
    remove_archive,
    write_archive,
)
from larapress_installer.new_cmd.installer_runner import build_install_commands, find_composer
from larapress_installer.new_cmd.permissions import WRITABLE_DIRECTORIES, WRITABLE_MODE, chmod_tree
from larapress_installer.new_cmd.release_fetcher import (
    DEFAULT_RELEASE_URL,
    ReleaseChannel,
    archive_url,
)

ENV_TEMPLATE = ".env.example"
ENV_FILE = ".env"
MANIFEST_FILE = "composer.json"
LOCK_FILE = "composer.lock"

MANIFEST_PATCH = {
    "extra": {
        "installer-paths": {
            "public/content/mu-plugins/{$name}/": [
                "larapress/framework",
            ],
        },
        "wordpress-install-dir": "public/cms",
        "include_files": [
            "public/cms/wp-includes/l10n.php",
        ],
    },
    "require": {
        "lara-press/framework": "~7.0",
        "johnpbloch/wordpress": "~5.4",
        "funkjedi/composer-include-files": "^1.0",
    },
}

PERMISSION_HINT = (
    'You should verify that the "storage" and "bootstrap/cache" directories are writable.'
)


class PipelineStage(enum.Enum):
    NOT_STARTED = "not-started"
    VERIFIED = "verified"
    FETCHED = "fetched"
    EXTRACTED = "extracted"
    PERMISSIONS_SET = "permissions-set"
    CLEANED_UP = "cleaned-up"
    ENV_CONFIGURED = "env-configured"
    MANIFEST_CONFIGURED = "manifest-configured"
    DELEGATED = "delegated"
    FAILED = "failed"


@dataclass
class StageResult:
    """Outcome of a single stage."""
    stage: PipelineStage
    error: Optional[ScaffoldError] = None
    warnings: List[ScaffoldError] = field(default_factory=list)
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineConfig:
    """Everything a run needs to know about where and what to install."""
    working_dir: str
    target_dir: str
    channel: ReleaseChannel = ReleaseChannel.STABLE
    force: bool = False
    no_ansi: bool = False
    release_url: str = DEFAULT_RELEASE_URL


@dataclass
class PipelineCollaborators:
    """Bundles the fetcher, prompt, installer runner and filesystem helpers."""
    fetcher: object
    ask: Callable[[str, str], str]
    runner: object
    extract: Callable = extract_archive
    chmod: Callable = chmod_tree


def env_values(directory_name: str, database: str, username: str, password: str) -> dict:
    """Values written into the new application's .env file."""
    return {
        "APP_URL": app_url(directory_name),
        "DB_DATABASE": database,
        "DB_USERNAME": username,
        "DB_PASSWORD": password,
        "MAIL_MAILER": "log",
    }


def app_url(directory_name: str) -> str:
    return f"https://{directory_name}.dev"


class ScaffoldPipeline:
    """Orchestrates the stages of ``larapress new``."""

    def __init__(self, config: PipelineConfig, collaborators: PipelineCollaborators):
        self.config = config
        self._collaborators = collaborators
        self.stage = PipelineStage.NOT_STARTED
        self.history: List[StageResult] = []
        self.error: Optional[ScaffoldError] = None
        self._archive: Optional[bytes] = None
        self._archive_path: Optional[str] = None

    @property
    def target(self) -> Path:
        return Path(self.config.target_dir)

    @property
    def directory_name(self) -> str:
        return self.target.name

    def run(self) -> int:
        """Run every stage in order and return the process exit code."""
        for step in self._steps():
            result = step()
            self.history.append(result)
            for warning in result.warnings:
                click.echo(f"Warning: {warning}", err=True)
            if not result.ok:
                self.stage = PipelineStage.FAILED
                self.error = result.error
                return result.exit_code or 1
            self.stage = result.stage
            if self.stage == PipelineStage.VERIFIED:
                click.echo("Crafting application...")
        return 0

    def _steps(self):
        return [
            self.verify_target,
            self.fetch,
            self.extract,
            self.prepare_writable_directories,
            self.clean_up,
            self.configure_env,
            self.configure_manifest,
            self.delegate,
        ]

    def verify_target(self) -> StageResult:
        if self.config.force:
            return StageResult(PipelineStage.VERIFIED)

        target = self.target
        exists = target.exists() or target.is_symlink()
        if exists and not _same_path(target, self.config.working_dir):
            return StageResult(
                PipelineStage.VERIFIED,
                error=TargetExistsError("Application already exists!", target),
            )
        return StageResult(PipelineStage.VERIFIED)

    def fetch(self) -> StageResult:
        url = archive_url(self.config.channel, self.config.release_url)
        try:
            self._archive = self._collaborators.fetcher.fetch(url)
        except FetchError as e:
            return StageResult(PipelineStage.FETCHED, error=e)
        return StageResult(PipelineStage.FETCHED)

    def extract(self) -> StageResult:
        self._archive_path = make_archive_filename(self.config.working_dir)
        extracted = False
        try:
            write_archive(self._archive_path, self._archive)
            self._collaborators.extract(self._archive_path, str(self.target))
            extracted = True
        except ScaffoldError as e:
            return StageResult(PipelineStage.EXTRACTED, error=e)
        finally:
            self._archive = None
            if not extracted:
                remove_archive(self._archive_path)
        return StageResult(PipelineStage.EXTRACTED)

    def prepare_writable_directories(self) -> StageResult:
        try:
            for relative_path in WRITABLE_DIRECTORIES:
                self._collaborators.chmod(str(self.target / relative_path), WRITABLE_MODE)
        except OSError as e:
            warning = PermissionWarning(PERMISSION_HINT, cause=e)
            return StageResult(PipelineStage.PERMISSIONS_SET, warnings=[warning])
        return StageResult(PipelineStage.PERMISSIONS_SET)

    def clean_up(self) -> StageResult:
        if self._archive_path:
            remove_archive(self._archive_path)
        return StageResult(PipelineStage.CLEANED_UP)

    def configure_env(self) -> StageResult:
        template = self.target / ENV_TEMPLATE
        env_file = self.target / ENV_FILE
        try:
            shutil.copyfile(template, env_file)
        except FileNotFoundError as e:
            return StageResult(
                PipelineStage.ENV_CONFIGURED,
                error=EnvReadError("Environment template not found", template, e),
            )
        except OSError as e:
            return StageResult(
                PipelineStage.ENV_CONFIGURED,
                error=WriteError("Unable to create environment file", env_file, e),
            )

        ask = self._collaborators.ask
        database = ask("DB_DATABASE=", "")
        username = ask("DB_USERNAME=", "")
        password = ask("DB_PASSWORD=", "")

        values = env_values(self.directory_name, database, username, password)
        try:
            EnvFileMerger.load(env_file).update_all(values).publish()
        except ScaffoldError as e:
            return StageResult(PipelineStage.ENV_CONFIGURED, error=e)
        return StageResult(PipelineStage.ENV_CONFIGURED)

    def configure_manifest(self) -> StageResult:
        lock_file = self.target / LOCK_FILE
        try:
            lock_file.unlink(missing_ok=True)
        except OSError as e:
            return StageResult(
                PipelineStage.MANIFEST_CONFIGURED,
                error=WriteError("Unable to remove stale lock file", lock_file, e),
            )

        try:
            manifest = ManifestMerger.load(self.target / MANIFEST_FILE)
            manifest.merge_sections(copy.deepcopy(MANIFEST_PATCH)).publish()
        except ScaffoldError as e:
            return StageResult(PipelineStage.MANIFEST_CONFIGURED, error=e)
        return StageResult(PipelineStage.MANIFEST_CONFIGURED)

    def delegate(self) -> StageResult:
        composer = find_composer(self.config.working_dir)
        commands = build_install_commands(composer, no_ansi=self.config.no_ansi)
        exit_code = self._collaborators.runner.run_sequence(commands, str(self.target))
        if exit_code != 0:
            return StageResult(
                PipelineStage.DELEGATED,
                error=DelegatedProcessFailure(exit_code),
                exit_code=exit_code,
            )
        return StageResult(PipelineStage.DELEGATED)


def _same_path(path: Path, other) -> bool:
    return os.path.realpath(path) == os.path.realpath(other)

"""InstallerRunner: runs the Composer install sequence in a new application.

Commands are run one after another and the sequence stops at the first
non-zero exit. When a terminal is available the child inherits it so that
Composer's own prompts work; otherwise combined output is streamed line by
line as it arrives.
"""

import os
import shutil
import subprocess
import sys
from typing import Callable, List, Optional, Sequence

PUBLISH_PROVIDER = "LaraPress\\Foundation\\Providers\\PublishServiceProvider"

COMPOSER_SCRIPTS = (
    "post-root-package-install",
    "post-create-project-cmd",
    "post-autoload-dump",
)


def find_composer(working_dir) -> List[str]:
    """Return the command prefix used to invoke Composer.

    A ``composer.phar`` in the working directory takes precedence over a
    globally installed ``composer``.
    """
    phar = os.path.join(str(working_dir), "composer.phar")
    if os.path.isfile(phar):
        return [shutil.which("php") or "php", phar]
    return ["composer"]


def build_install_commands(composer: Sequence[str], no_ansi: bool = False) -> List[List[str]]:
    """Build the ordered install, lifecycle-hook and asset-publishing commands."""
    commands = [list(composer) + ["install", "--no-scripts"]]
    commands += [list(composer) + ["run-script", script] for script in COMPOSER_SCRIPTS]
    commands.append(
        ["php", "artisan", "vendor:publish", f"--provider={PUBLISH_PROVIDER}", "--force"]
    )

    if no_ansi:
        commands = [cmd + ["--no-ansi"] for cmd in commands]

    return commands


def _terminal_available() -> bool:
    return os.name != "nt" and sys.stdin.isatty() and sys.stdout.isatty()


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class InstallerRunner:
    """Runs a list of commands sequentially in a working directory."""

    def __init__(
        self,
        attach_tty: Optional[bool] = None,
        output: Optional[Callable[[str], None]] = None,
    ):
        self._attach_tty = _terminal_available() if attach_tty is None else attach_tty
        self._output = output or _write_stdout

    def run_sequence(self, commands: Sequence[Sequence[str]], cwd) -> int:
        """Run ``commands`` in ``cwd``; return the first non-zero exit code, else 0."""
        for cmd in commands:
            self._output(f"Running: {' '.join(cmd)}\n")
            returncode = self.run(cmd, cwd)
            if returncode != 0:
                return returncode
        return 0

    def run(self, cmd: Sequence[str], cwd) -> int:
        """Run one command; a child killed by signal N is reported as 128 + N."""
        try:
            if self._attach_tty:
                returncode = subprocess.run(list(cmd), cwd=cwd).returncode
            else:
                returncode = self._run_streaming(cmd, cwd)
        except FileNotFoundError:
            print(f"Error: command not found: {cmd[0]}", file=sys.stderr)
            return 127
        if returncode < 0:
            return 128 - returncode
        return returncode

    def _run_streaming(self, cmd: Sequence[str], cwd) -> int:
        process = subprocess.Popen(
            list(cmd),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            bufsize=1,
        )
        with process:
            for line in process.stdout:
                self._output(line)
        return process.returncode

"""Click command for creating a new application."""

import os
import sys

import click

from larapress_installer.new_cmd.installer_runner import InstallerRunner
from larapress_installer.new_cmd.new_opts import NewOpts
from larapress_installer.new_cmd.pipeline import PipelineCollaborators, ScaffoldPipeline
from larapress_installer.new_cmd.ready_banner import render_ready_banner
from larapress_installer.new_cmd.release_fetcher import DEFAULT_RELEASE_URL, ReleaseFetcher


def ask(prompt, default):
    """Ask the user for a value, returning ``default`` on an empty answer."""
    return click.prompt(prompt, default=default, show_default=False, prompt_suffix="")


def new(opts: NewOpts, collaborators: PipelineCollaborators, working_dir) -> int:
    """Scaffold an application and return the exit code."""
    pipeline = ScaffoldPipeline(opts.pipeline_config(working_dir), collaborators)
    exit_code = pipeline.run()

    if pipeline.error is not None:
        click.echo(f"Error: {pipeline.error}", err=True)
        return exit_code

    click.echo(render_ready_banner(pipeline.directory_name, in_working_dir=not opts.name), nl=False)
    return exit_code


@click.command("new")
@click.argument("name", required=False)
@click.option("--dev", is_flag=True,
              help='Install the latest "development" release')
@click.option("--force", is_flag=True,
              help="Install even if the directory already exists")
@click.option("--no-ansi", is_flag=True,
              help="Disable ANSI output in the install commands")
@click.option("--release-url", envvar="LARAPRESS_RELEASE_URL", default=DEFAULT_RELEASE_URL,
              show_default=True, help="Base URL of the release archives")
def new_cmd(**kwargs):
    """Create a new LaraPress application."""
    opts = NewOpts(**kwargs)
    collaborators = PipelineCollaborators(
        fetcher=ReleaseFetcher(),
        ask=ask,
        runner=InstallerRunner(),
    )
    sys.exit(new(opts, collaborators, os.getcwd()))

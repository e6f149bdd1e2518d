"""Top-level Click group for the larapress CLI."""

import click

from larapress_installer.new_cmd.cli import new_cmd


@click.group()
def main():
    """larapress - LaraPress application installer."""


main.add_command(new_cmd)

#!/usr/bin/env python3
"""
Main entry point for the hookdeploy command line.
"""
import click

from . import __version__
from .cli.repository_cli import install, list_repositories, remove, logs, test
from .cli.server_cli import serve


@click.group()
@click.version_option(__version__, prog_name="hookdeploy")
def cli():
    """hookdeploy - webhook-triggered deployments with rollback"""
    pass


cli.add_command(install)
cli.add_command(list_repositories)
cli.add_command(remove)
cli.add_command(logs)
cli.add_command(test)
cli.add_command(serve)


if __name__ == '__main__':
    cli()

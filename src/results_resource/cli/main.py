import sys

import click

from results_resource import __version__
from results_resource.logging_config import setup_colored_logging

from .commands.check_cmd import check
from .commands.in_cmd import in_

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(
    __version__, "-v", "--version", help="Show the CLI version and exit."
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="RESULTS_RESOURCE_LOG_LEVEL",
    default="INFO",
    help="Log level for messages written to stderr.",
)
def cli(log_level: str):
    """Test results pipeline resource"""
    setup_colored_logging(level=log_level)


cli.add_command(check)
cli.add_command(in_)


def main():
    cli()


def check_main():
    """Entry point for ``/opt/resource/check``."""
    cli(args=["check"])


def in_main():
    """Entry point for ``/opt/resource/in``."""
    cli(args=["in", *sys.argv[1:]])


if __name__ == "__main__":
    main()

"""
pwnguard CLI - Main entry point for the command-line interface.
"""

import click
from rich.console import Console

from pwnguard import __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="pwnguard")
@click.pass_context
def main(ctx: click.Context) -> None:
    """pwnguard - Password Breach Exposure Checks

    Checks passwords against known breach datasets without ever
    sending the password, or its full hash, over the network.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


# Import and register subcommand groups
from pwnguard.pwned.cli import add_pwned_commands

add_pwned_commands(main)


if __name__ == "__main__":
    main()

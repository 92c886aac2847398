"""
ethtx CLI

Command-line interface for signing, sending and inspecting legacy
(EIP-155) Ethereum transactions over JSON-RPC.

Commands:
  whoami         - Show the address of the configured key
  sign           - Sign a transaction offline
  send           - Sign and broadcast a transaction
  tx             - Show a transaction
  receipt        - Show a transaction receipt
  revert-reason  - Explain why a transaction failed
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .signing.keys import get_address, load_private_key


@click.group()
@click.version_option(version=__version__, prog_name="ethtx")
@click.option("--verbose", "-v", is_flag=True, help="Log JSON-RPC traffic")
def cli(verbose: bool) -> None:
    """ethtx - sign, send and inspect Ethereum transactions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============ Commands ============

from .commands.send import send, sign
from .commands.inspect import receipt, revert_reason, tx

cli.add_command(sign)
cli.add_command(send)
cli.add_command(tx)
cli.add_command(receipt)
cli.add_command(revert_reason)


@cli.command()
def whoami() -> None:
    """Show current key identity."""
    try:
        pk = load_private_key()
        address = get_address(pk)
        click.echo(f"Address: {address}")
    except ValueError as exc:
        click.echo(f"No key found: {exc}")
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

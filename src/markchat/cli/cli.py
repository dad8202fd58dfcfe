"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from markchat.cli.commands import emoji_cmd, headings_cmd, render_cmd


app = typer.Typer(name="markchat", no_args_is_help=True, help="Compile chat-flavoured markdown to HTML")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    """Configure logging once for every command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", force=True)


app.command(name="render")(render_cmd)
app.command(name="headings")(headings_cmd)
app.command(name="emoji")(emoji_cmd)

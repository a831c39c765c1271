# passwordless_store/cli/main_cli.py
import logging

import typer
from typing_extensions import Annotated

from ..settings import settings
from . import tokens_cli

app = typer.Typer(
    name="passwordless-store",
    help=f"{settings.app_name} command line interface.",
    no_args_is_help=True
)

app.add_typer(tokens_cli.app, name="tokens")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log storage requests at DEBUG level.")
    ] = False
):
    if verbose:
        logging.getLogger("passwordless_store").setLevel(logging.DEBUG)


def cli_entry_point():
    app()


if __name__ == "__main__":
    cli_entry_point()

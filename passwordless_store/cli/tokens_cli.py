# passwordless_store/cli/tokens_cli.py
import typer
from typing import Optional
from typing_extensions import Annotated

from ..settings import settings
from .utils_cli import describe, run_store_operation

app = typer.Typer(
    name="tokens",
    help="Inspect and manage stored passwordless tokens.",
    no_args_is_help=True
)


@app.command("store")
def store_token(
    token: Annotated[str, typer.Argument(help="Plaintext token issued to the user.")],
    uid: Annotated[str, typer.Argument(help="User identifier owning the token.")],
    ttl_ms: Annotated[
        Optional[int],
        typer.Option("--ttl-ms", help="Token lifetime in milliseconds.", min=1)
    ] = None,
    origin_url: Annotated[
        Optional[str],
        typer.Option("--origin-url", help="URL to redirect to after successful authentication.")
    ] = None
):
    """Store a token for a user, replacing any token the user already had."""
    ms_to_live = ttl_ms if ttl_ms is not None else settings.default_token_ttl_ms
    run_store_operation(lambda store: store.store_or_update(token, uid, ms_to_live, origin_url))
    typer.secho(f"CLI: Token stored for user '{uid}' (valid for {ms_to_live} ms).", fg=typer.colors.GREEN)


@app.command("authenticate")
def authenticate_token(
    token: Annotated[str, typer.Argument(help="Plaintext token presented by the user.")],
    uid: Annotated[str, typer.Argument(help="User identifier the token was issued to.")]
):
    """Check a token. Exits with code 1 when the token is not valid."""
    result = run_store_operation(lambda store: store.authenticate(token, uid))
    if not result.valid:
        typer.secho(f"CLI: Token is not valid for user '{uid}'.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    typer.secho(f"CLI: Token is valid for user '{uid}'.", fg=typer.colors.GREEN)
    typer.echo(f"CLI: Origin URL: {describe(result.origin_url)}")


@app.command("invalidate")
def invalidate_user(
    uid: Annotated[str, typer.Argument(help="User identifier whose token is revoked.")]
):
    """Revoke the token of a user. Unknown users are not an error."""
    run_store_operation(lambda store: store.invalidate_user(uid))
    typer.secho(f"CLI: Token invalidated for user '{uid}'.", fg=typer.colors.GREEN)


@app.command("count")
def count_tokens():
    """Print the number of stored tokens, expired ones included."""
    total = run_store_operation(lambda store: store.length())
    typer.echo(str(total))


@app.command("clear")
def clear_tokens(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt.")
    ] = False
):
    """Delete EVERY object in the configured bucket or database, not only tokens."""
    if not yes:
        typer.confirm(
            f"This deletes every object in the '{settings.storage_backend}' store. Continue?",
            abort=True
        )
    run_store_operation(lambda store: store.clear())
    typer.secho("CLI: Token store cleared.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

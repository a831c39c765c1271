# passwordless_store/cli/utils_cli.py
import asyncio
import sqlite3
from typing import Any, Awaitable, Callable, TypeVar

import typer
from botocore.exceptions import BotoCoreError, ClientError

from ..dependencies import create_token_store
from ..settings import settings
from ..storage.errors import ObjectStorageError
from ..tokens.errors import TokenStoreError
from ..tokens.storage_interfaces import AbstractTokenStore

T = TypeVar("T")


def build_store() -> AbstractTokenStore:
    """Create the token store the CLI operates on, as configured by settings."""
    return create_token_store(settings)


async def _with_store(operation: Callable[[AbstractTokenStore], Awaitable[T]]) -> T:
    store = build_store()
    await store.initialize()
    try:
        return await operation(store)
    finally:
        await store.teardown()


def run_store_operation(operation: Callable[[AbstractTokenStore], Awaitable[T]]) -> T:
    """
    Run an async token store operation to completion and report failures on the console.

    Configuration, storage and validation errors end the command with exit code 1.
    """
    typer.echo(f"CLI: Using '{settings.storage_backend}' storage backend.")
    try:
        return asyncio.run(_with_store(operation))
    except (TokenStoreError, ObjectStorageError) as e:
        typer.secho(f"CLI: Token store error - {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except (ClientError, BotoCoreError) as e:
        typer.secho(f"CLI: S3 error - {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except sqlite3.Error as e:
        typer.secho(f"CLI: SQLite error - {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def describe(value: Any) -> str:
    """Render an optional value for console output."""
    return "<none>" if value is None or value == "" else str(value)

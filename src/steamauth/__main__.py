import logging
from typing import Optional
import typer
from pydantic import ValidationError

from .config import get_settings, Settings
from .auth.callback import Cancelled
from .auth.errors import SteamAuthError
from .auth.openid import Redirector
from .auth.verifier import verify_querystring
from .api.app import create_app
from .steam.client import make_client
import uvicorn

app = typer.Typer()

logger = logging.getLogger("steamauth")


def setup_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to .env config file"
    ),
    verbose: int = typer.Option(0, "-v", count=True, help="Increase verbosity (-v, -vv)"),
):
    try:
        if config_file:
            settings = get_settings(config_file)
        else:
            settings = get_settings()
    except ValidationError as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1)
    ctx.obj = {"settings": settings}
    setup_logging(verbose)
    logger.debug("Settings loaded: %s", settings.model_dump())


@app.command()
def login_url(
    ctx: typer.Context,
    realm: Optional[str] = typer.Option(None, help="Site origin, defaults to STEAMAUTH_REALM"),
    callback_path: Optional[str] = typer.Option(None, help="Callback path, defaults to STEAMAUTH_CALLBACK_PATH"),
):
    settings: Settings = ctx.obj["settings"]
    try:
        redirector = Redirector(realm or settings.realm, callback_path or settings.callback_path)
    except SteamAuthError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(redirector.url())


@app.command()
def verify(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query string Steam appended to the callback URL"),
    check_return_to: bool = typer.Option(True, help="Require openid.return_to to match the configured callback"),
):
    settings: Settings = ctx.obj["settings"]
    return_to = None
    try:
        if check_return_to:
            return_to = Redirector(settings.realm, settings.callback_path).return_to
        with make_client(settings.http_timeout) as client:
            result = verify_querystring(client, query, return_to=return_to)
    except SteamAuthError as exc:
        logger.info("Verification failed: %r", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    if isinstance(result, Cancelled):
        typer.echo("cancelled")
    else:
        typer.echo(str(result))


@app.command(name="serve-api")
def serve_api(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8080, "--port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload (dev only)"),
):

    app_instance = create_app(ctx.obj["settings"])
    uvicorn.run(app_instance, host=host, port=port, reload=reload)

if __name__ == "__main__":
    app()

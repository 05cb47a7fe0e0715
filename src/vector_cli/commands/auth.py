"""Authentication commands: login, logout and status."""

from __future__ import annotations

import sys
from typing import Any

import typer

from vector_cli.config import AppContext
from vector_cli.errors import ValidationError, VectorError
from vector_cli.registry import EndpointDescriptor, detail_shape
from vector_cli.services import classifier, formatters, renderer, request_builder
from vector_cli.services.output_mode import OutputMode
from vector_cli.services.transport import ApiResponse

app = typer.Typer(no_args_is_help=True)

USER = detail_shape(
    "user",
    [
        ("id", "ID"),
        ("name", "Name"),
        ("email", "Email"),
    ],
)

STATUS = detail_shape(
    "auth-status",
    [
        ("status", "Status"),
        ("name", "Name"),
        ("email", "Email"),
        ("token", "Token", formatters.masked),
        ("source", "Token Source"),
        ("api_url", "API URL"),
    ],
    root="",
)

WHOAMI = EndpointDescriptor(
    ("auth",), "whoami", "GET", "/user",
    shape=USER,
    help="Show the authenticated user",
)

DESCRIPTORS = (WHOAMI,)

SOURCES = {"flag": "--token", "env": "VECTOR_API_KEY", "file": "credentials file"}


def _app_context(ctx: typer.Context) -> AppContext:
    app_ctx = ctx.find_object(AppContext)
    if app_ctx is None:
        raise VectorError("No application context")
    return app_ctx


def _fetch_user(app_ctx: AppContext, token: str) -> ApiResponse:
    request = request_builder.build(WHOAMI, [], {}, token, app_ctx.api_url)
    response = app_ctx.transport.execute(request)
    if not response.ok:
        raise classifier.to_error(response)
    return response


def _read_token() -> str:
    if sys.stdin.isatty():
        return typer.prompt("API Token", hide_input=True, err=True)
    return sys.stdin.readline().strip()


def _emit(app_ctx: AppContext, payload: Any) -> None:
    app_ctx.console.out(renderer.to_json(payload, app_ctx.pretty), highlight=False)


@app.command()
def login(ctx: typer.Context) -> None:
    """Log in with an API token (--token, VECTOR_API_KEY, prompt or stdin)."""
    app_ctx = _app_context(ctx)
    store = app_ctx.credentials
    token = (store.flag_token or store.env_token or _read_token()).strip()
    if not token:
        raise ValidationError("Token cannot be empty")

    response = _fetch_user(app_ctx, token)
    store.persist(token)

    if app_ctx.output_mode is OutputMode.JSON:
        _emit(app_ctx, response.json())
        return
    app_ctx.console.out("Successfully authenticated.", highlight=False)
    email = formatters.lookup(response.json(), "data.email")
    if isinstance(email, str):
        app_ctx.console.out(f"Logged in as: {email}", highlight=False)


@app.command()
def logout(ctx: typer.Context) -> None:
    """Log out and remove the stored token."""
    app_ctx = _app_context(ctx)
    removed = app_ctx.credentials.clear()
    if app_ctx.output_mode is OutputMode.JSON:
        _emit(app_ctx, {"message": "Logged out successfully" if removed else "Not logged in"})
    else:
        app_ctx.console.out("Logged out successfully." if removed else "Not logged in.", highlight=False)


@app.command()
def status(ctx: typer.Context) -> None:
    """Check authentication status."""
    app_ctx = _app_context(ctx)
    store = app_ctx.credentials
    token = store.current_token()
    json_mode = app_ctx.output_mode is OutputMode.JSON

    if not token:
        if json_mode:
            _emit(app_ctx, {"authenticated": False, "message": "Not logged in"})
        else:
            app_ctx.console.out(
                "Not logged in. Run 'vector auth login' to authenticate.", highlight=False
            )
        return

    user = formatters.lookup(_fetch_user(app_ctx, token).json(), "data") or {}
    if json_mode:
        _emit(app_ctx, {
            "authenticated": True,
            "user": {key: user.get(key) for key in ("id", "name", "email")},
        })
        return

    view = {
        "status": "Authenticated",
        "name": user.get("name"),
        "email": user.get("email"),
        "token": token,
        "source": SOURCES.get(store.source or ""),
        "api_url": app_ctx.api_url,
    }
    renderer.render(view, STATUS, OutputMode.TABLE).write(app_ctx.console, app_ctx.err_console)

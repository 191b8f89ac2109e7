from __future__ import annotations
from pathlib import Path
from typing import Optional
import typer

from .bootstrap import build_app
from .core.chat_session import ChatSession
from .core.errors import ProviderError, ProviderHttpFailure, TransportFailure

app = typer.Typer(add_completion=False)

EXIT_HTTP_FAILURE = 2
EXIT_TRANSPORT_FAILURE = 3
EXIT_OTHER_FAILURE = 1


def describe_failure(exc: Exception) -> str:
    if isinstance(exc, ProviderHttpFailure):
        return f"[http {exc.status_code}] {exc.body}"
    if isinstance(exc, TransportFailure):
        tag = "timeout" if exc.is_timeout else "network"
        return f"[{tag}] {exc.message}"
    return f"[error] {exc}"


@app.command()
def chat(
    config: Path = typer.Option(Path("config/default.yaml"), "--config", "-c"),
    once: Optional[str] = typer.Option(None, "--once", help="Send one message, print the reply and exit."),
    system: Optional[str] = typer.Option(None, "--system", help="System prompt for the session."),
):
    ctx = build_app(config)
    provider = ctx["provider"]
    session = ChatSession(model=provider, system_prompt=system)

    try:
        if once is not None:
            try:
                typer.echo(session.run_turn(once))
            except ProviderHttpFailure as e:
                typer.echo(describe_failure(e), err=True)
                raise typer.Exit(EXIT_HTTP_FAILURE)
            except TransportFailure as e:
                typer.echo(describe_failure(e), err=True)
                raise typer.Exit(EXIT_TRANSPORT_FAILURE)
            except ProviderError as e:
                typer.echo(describe_failure(e), err=True)
                raise typer.Exit(EXIT_OTHER_FAILURE)
            return

        typer.echo("chatlink. Type /help for commands. Ctrl+C to quit.")
        while True:
            try:
                user_input = input("chat> ").strip()
            except (EOFError, KeyboardInterrupt):
                typer.echo("\nBye.")
                return

            if not user_input:
                continue
            if user_input in ("/exit", "/quit"):
                typer.echo("Bye.")
                return
            if user_input == "/help":
                typer.echo("Commands: /help, /reset, /exit, /quit")
                continue
            if user_input == "/reset":
                session.reset()
                continue

            try:
                typer.echo(session.run_turn(user_input))
            except ProviderError as e:
                typer.echo(describe_failure(e))
    finally:
        provider.close()


@app.command()
def serve(
    config: Path = typer.Option(Path("config/default.yaml"), "--config", "-c"),
    host: str = "127.0.0.1",
    port: int = 8000,
):
    from .web.app import run

    run(config=config, host=host, port=port)


def main() -> None:
    app()

# studio_agent/main.py
"""Entry-point for the studio-agent CLI"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer
from chuk_term.ui import output
from dotenv import load_dotenv

from studio_agent.chat.chat_handler import ChatHandler
from studio_agent.chat.dispatcher import HttpAgentDispatcher
from studio_agent.chat.orchestrator import ConfirmationOrchestrator
from studio_agent.chat.ui_manager import HISTORY_FILE, ChatUIManager
from studio_agent.config import ClientSettings, EnvVar, get_env, setup_logging
from studio_agent.config.defaults import DEFAULT_LOG_LEVEL

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Converse with an agent and approve its tool calls.")


@app.callback()
def main_callback(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Agent service base URL"),
    auth_token: Optional[str] = typer.Option(None, "--auth-token", help="Bearer token"),
    request_timeout: Optional[float] = typer.Option(None, help="HTTP request timeout (s)"),
    response_timeout: Optional[float] = typer.Option(None, help="Agent round-trip timeout (s)"),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help="Fail chained confirmations that name a different conversation",
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Suppress most log output"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose logging"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Set log level"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Rotating debug log file"),
) -> None:
    """Configure logging and settings shared by every command."""
    setup_logging(
        level=log_level or get_env(EnvVar.LOG_LEVEL, DEFAULT_LOG_LEVEL),
        quiet=quiet,
        verbose=verbose,
        log_file=log_file or get_env(EnvVar.LOG_FILE),
    )
    ctx.obj = ClientSettings.from_env(
        api_url=api_url,
        auth_token=auth_token,
        request_timeout=request_timeout,
        response_timeout=response_timeout,
        strict_correlation=strict,
    )


@app.command()
def chat(ctx: typer.Context) -> None:
    """Start an interactive chat session."""
    _run(ctx.obj, None)


@app.command()
def ask(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Message to send to the agent"),
) -> None:
    """Send one message and walk any approvals it triggers."""
    _run(ctx.obj, text)


def _run(settings: ClientSettings, text: str | None) -> None:
    try:
        asyncio.run(_session(settings, text))
    except KeyboardInterrupt:
        output.warning("Interrupted")
        logger.debug("Interrupted by user")
    except Exception as e:
        output.error(f"Error: {e}")
        logger.error(f"Chat failed: {e}", exc_info=True)
        raise typer.Exit(code=1)


async def _session(settings: ClientSettings, text: str | None) -> None:
    async with HttpAgentDispatcher(settings) as dispatcher:
        orchestrator = ConfirmationOrchestrator.from_settings(dispatcher, settings)
        handler = ChatHandler(
            orchestrator,
            ChatUIManager(history_file=None if text else HISTORY_FILE),
            metadata={"api_url": settings.api_url},
        )
        if text is None:
            await handler.run()
        else:
            await handler.handle_message(text)


def main() -> None:
    """Main entry point."""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()

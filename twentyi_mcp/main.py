#!/usr/bin/env python3
"""
twentyi-mcp - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the MCP stdio server or the HTTP API

All business logic is in the modules, following black box principles.
"""

import asyncio
import json
import logging
import sys
from typing import Optional, Tuple

import click
import httpx
import uvicorn
from dotenv import load_dotenv

from twentyi_mcp import __version__
from twentyi_mcp.capabilities import DEFAULT_MODULES
from twentyi_mcp.config import ConfigProvider, Credentials, EnvConfigProvider
from twentyi_mcp.errors import CapabilityLoadError, ConfigurationError
from twentyi_mcp.logging_config import configure_logging, get_logging_config
from twentyi_mcp.modules.api import create_app
from twentyi_mcp.modules.auth import AuthModule
from twentyi_mcp.modules.dispatcher import ProtocolDispatcher
from twentyi_mcp.modules.mcp_server import run_stdio
from twentyi_mcp.modules.registry import load_modules
from twentyi_mcp.modules.upstream import UpstreamClient

logger = logging.getLogger("twentyi_mcp.main")

STDOUT = "ext://sys.stdout"
STDERR = "ext://sys.stderr"


def build_dispatcher(
    credentials: Credentials,
    config_provider: ConfigProvider,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tuple[ProtocolDispatcher, UpstreamClient]:
    """
    Wire the upstream client, capability modules and dispatcher.

    Raises:
        ConfigurationError: If upstream settings are invalid
        CapabilityLoadError: If two modules collide or a module breaks its contract
    """
    client = UpstreamClient(credentials, config_provider.get_upstream_config(), transport=transport)
    registry = load_modules(DEFAULT_MODULES, client)
    return ProtocolDispatcher(registry), client


def startup(
    config_provider: ConfigProvider,
    stream: str,
    log_level: Optional[str] = None,
) -> Tuple[ProtocolDispatcher, UpstreamClient]:
    """
    Configure logging and build the dispatcher, exiting on fatal errors.

    Logging is configured before credentials are validated so that the
    failure itself is reported.
    """
    level = (log_level or config_provider.get_log_level()).upper()
    try:
        credentials = config_provider.get_credentials()
    except ConfigurationError as e:
        configure_logging(level=level, stream=stream)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    configure_logging(level=level, stream=stream, secrets=credentials.secrets())

    try:
        dispatcher, client = build_dispatcher(credentials, config_provider)
    except (ConfigurationError, CapabilityLoadError) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    logger.info(f"twentyi-mcp v{__version__} ready with {len(dispatcher.registry)} capabilities")
    return dispatcher, client


async def serve_stdio(dispatcher: ProtocolDispatcher, client: UpstreamClient) -> None:
    try:
        await run_stdio(dispatcher)
    finally:
        await client.aclose()


@click.group()
@click.version_option(__version__, prog_name="twentyi-mcp")
@click.option("--log-level", "log_level", default=None, help="Overrides LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    """20i hosting capabilities for MCP clients and HTTP callers."""
    load_dotenv()
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    ctx.obj["config_provider"] = EnvConfigProvider()


@cli.command()
@click.pass_context
def stdio(ctx: click.Context):
    """Serve MCP over stdin/stdout."""
    # stdout carries the MCP protocol, so logs go to stderr
    dispatcher, client = startup(ctx.obj["config_provider"], STDERR, ctx.obj["log_level"])
    asyncio.run(serve_stdio(dispatcher, client))


@cli.command()
@click.option("--host", "host", default=None, help="Overrides API_HOST")
@click.option("--port", "port", type=int, default=None, help="Overrides API_PORT")
@click.pass_context
def http(ctx: click.Context, host: Optional[str], port: Optional[int]):
    """Serve discovery and invocation over HTTP."""
    config_provider: ConfigProvider = ctx.obj["config_provider"]
    dispatcher, client = startup(config_provider, STDOUT, ctx.obj["log_level"])

    auth_config = config_provider.get_auth_config()
    if not auth_config.is_configured:
        logger.error("API_KEYS must be set to serve over HTTP")
        sys.exit(1)

    api_config = config_provider.get_api_config()
    level = (ctx.obj["log_level"] or config_provider.get_log_level()).upper()
    app = create_app(
        dispatcher,
        AuthModule(auth_config),
        cors_origins=api_config.cors_origins,
        shutdown_hooks=[client.aclose],
    )
    uvicorn.run(
        app,
        host=host or api_config.host,
        port=port or api_config.port,
        log_level=level.lower(),
        log_config=get_logging_config(
            level=level, stream=STDOUT, secrets=config_provider.get_credentials().secrets()
        ),
    )


@cli.command("list-capabilities")
def list_capabilities():
    """Print the capability table as JSON without contacting 20i."""
    configure_logging(level="WARNING", stream=STDERR)
    # Modules are only constructed here; no request is sent
    client = UpstreamClient(Credentials(api_key="", oauth_key="", combined_key=""))
    try:
        registry = load_modules(DEFAULT_MODULES, client)
    except CapabilityLoadError as e:
        logger.error(f"Capability table is invalid: {e}")
        sys.exit(1)
    finally:
        asyncio.run(client.aclose())

    click.echo(json.dumps([d.to_dict() for d in registry.descriptors()], indent=2))


if __name__ == "__main__":
    cli()

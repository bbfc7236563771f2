"""Command-line interface for the drug safety MCP server."""

import asyncio
import json
import logging
import sys

import click

from drug_safety_mcp.config import get_settings

logger = logging.getLogger("drug_safety_mcp")


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(package_name="drug-safety-mcp")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def main(log_level: str | None):
    """Drug Safety MCP: FDA adverse event, label and recall tools for LLM agents."""
    configure_logging(log_level or get_settings().log_level)


@main.command()
@click.option(
    "-t",
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Transport to serve on (default: from MCP_MODE)",
)
@click.option("--host", default=None, help="Bind host for the HTTP transport")
@click.option("--port", type=int, default=None, help="Bind port for the HTTP transport")
def serve(transport: str | None, host: str | None, port: int | None):
    """Run the MCP server."""
    settings = get_settings()
    overrides = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)
    if transport is None:
        transport = "http" if settings.http_mode else "stdio"

    try:
        if transport == "http":
            from drug_safety_mcp.api.main import run_http

            run_http(settings)
        else:
            from drug_safety_mcp.data_sources.fda import OpenFDAClient
            from drug_safety_mcp.mcp_server import run_stdio
            from drug_safety_mcp.tools.dispatcher import ToolDispatcher

            asyncio.run(run_stdio(ToolDispatcher(OpenFDAClient())))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)


@main.command("list-tools")
def list_tools():
    """List the available tools."""
    from drug_safety_mcp.tools.definitions import TOOLS

    for tool in TOOLS:
        click.echo(f"{tool.name:<32} {tool.annotations.title}")


@main.command()
@click.argument("tool")
@click.option("-a", "--args", "raw_args", default="{}", help="Tool arguments as a JSON object")
@click.option("-o", "--output", type=click.Path(), help="Output file path (JSON)")
def call(tool: str, raw_args: str, output: str | None):
    """Call a single tool and print its JSON result."""
    from drug_safety_mcp.data_sources.fda import OpenFDAClient
    from drug_safety_mcp.tools.dispatcher import ToolDispatcher
    from drug_safety_mcp.tools.errors import ToolError

    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e

    async def _run() -> dict:
        dispatcher = ToolDispatcher(OpenFDAClient())
        try:
            return await dispatcher.dispatch(tool, arguments)
        finally:
            await dispatcher.close()

    try:
        result = asyncio.run(_run())
    except ToolError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    text = json.dumps(result, indent=2, default=str)
    if output:
        from pathlib import Path

        Path(output).write_text(text)
        click.echo(f"Results saved to: {output}")
    else:
        click.echo(text)


if __name__ == "__main__":
    main()

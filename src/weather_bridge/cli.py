"""Interactive command-line chat client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import Callable, Optional, Sequence

from weather_bridge.client import AnthropicLLM
from weather_bridge.config import Settings, parse_log_level, parse_max_tool_rounds
from weather_bridge.connection import ToolServerConnection
from weather_bridge.errors import BridgeError
from weather_bridge.mediator import ChatMediator

logger = logging.getLogger(__name__)

USAGE = "Usage: weather-bridge <path_to_server_script>"
QUIT_COMMAND = "quit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-bridge",
        description="Chat with Claude using the tools of an MCP server.",
    )
    parser.add_argument(
        "server_script",
        nargs="?",
        help="Path to the MCP server script (.py or .js)",
    )
    parser.add_argument(
        "--max-tool-rounds",
        help="Tool rounds allowed per query; 0 or 'none' for unbounded",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


async def chat_loop(
    mediator: ChatMediator,
    *,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Read queries until ``quit`` or end of input, printing each answer."""
    write("\nMCP Client Started!")
    write("Type your queries or 'quit' to exit.")

    while True:
        try:
            # input() blocks, so keep it off the event loop
            message = await asyncio.to_thread(read_line, "\nQuery: ")
        except EOFError:
            break
        if message.strip().lower() == QUIT_COMMAND:
            break

        try:
            answer = await mediator.process_query(message)
        except Exception:
            logger.exception("Error processing query")
            continue
        write("\n" + answer)


async def run(server_script: str, settings: Settings) -> None:
    async with (
        AnthropicLLM(settings.model, api_key=settings.api_key) as llm,
        ToolServerConnection() as connection,
    ):
        await connection.connect(server_script)
        mediator = ChatMediator(llm, connection, max_tool_rounds=settings.max_tool_rounds)
        await chat_loop(mediator)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.server_script:
        print(USAGE)
        return 0

    try:
        settings = Settings.from_env()
        if args.max_tool_rounds is not None:
            settings = replace(
                settings, max_tool_rounds=parse_max_tool_rounds(args.max_tool_rounds)
            )
        if args.log_level is not None:
            settings = replace(settings, log_level=parse_log_level(args.log_level))
    except BridgeError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(args.server_script, settings))
    except BridgeError as exc:
        logger.error("Startup failed: %s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from weather_bridge import AnthropicLLM, ChatMediator, Settings, ToolServerConnection

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

SERVER_SCRIPT = Path(__file__).with_name("weather_server.py")


async def single_query(question: str, server_script: str) -> None:
    """
    Answer one question end to end.

    1) Spawn the weather server and list its tools
    2) Send the question to Claude with those tools
    3) Dispatch every tool call the model makes
    4) Print the final answer
    """
    settings = Settings.from_env()
    async with (
        AnthropicLLM(settings.model, api_key=settings.api_key) as llm,
        ToolServerConnection() as connection,
    ):
        await connection.connect(server_script)
        mediator = ChatMediator(llm, connection, max_tool_rounds=settings.max_tool_rounds)
        answer = await mediator.process_query(question)
        logger.info("Claude says: %s", answer)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("question", nargs="?", default="Are there any weather alerts in CA?")
    parser.add_argument("--server", default=str(SERVER_SCRIPT))
    args = parser.parse_args()

    asyncio.run(single_query(args.question, args.server))

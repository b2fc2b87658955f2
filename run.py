#!/usr/bin/env python
"""Serve the inspection API for one or more agents.

    python run.py --agent Echo --agent Scout
"""

import argparse

import uvicorn

from genesis_framework.api.main import app
from genesis_framework.config import settings
from genesis_framework.runtime import Agent, earning_agent_constitution, get_agent_manager


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the genesis-framework inspection API")
    parser.add_argument(
        "--agent",
        action="append",
        default=[],
        help="Agent name to load from the souls directory (repeatable)",
    )
    parser.add_argument(
        "--earning",
        action="store_true",
        help="Check agents against the earning-agent laws instead of the default three",
    )
    args = parser.parse_args()

    settings.setup_logging()
    settings.ensure_directories()
    manager = get_agent_manager()
    constitution = earning_agent_constitution() if args.earning else None
    for name in args.agent:
        manager.register(Agent(name=name, constitution=constitution))

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        # Keep uvicorn on the root handler installed by setup_logging
        log_config=None,
    )


if __name__ == "__main__":
    main()

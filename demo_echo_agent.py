#!/usr/bin/env python3
"""
genesis-framework quick start - a tiny agent that learns from each cycle.

    python demo_echo_agent.py           # one cycle
    python demo_echo_agent.py --loop 5  # one cycle every 5 seconds, Ctrl+C to stop
"""
import argparse
import asyncio
import json
from datetime import datetime

from genesis_framework import Agent
from genesis_framework.config import settings


def build_agent(soul_path: str) -> Agent:
    agent = Agent(
        name="Echo",
        soul_path=soul_path,
        identity={
            "purpose": "A simple digital life form that learns from each cycle",
            "creator": "You",
        },
    )

    async def observe_time(ctx):
        observation = f"It is {datetime.now():%H:%M:%S} on {datetime.now():%Y-%m-%d}"
        ctx.soul.remember(observation)
        print(f"  👁️ {observation}")
        return observation

    async def count_cycles(ctx):
        msg = f"I have lived through {ctx.cycle} cycles"
        print(f"  🧠 {msg}")
        if ctx.cycle % 5 == 0:
            ctx.soul.learn_lesson(f"After {ctx.cycle} cycles, I am still running")
            print(f"  💡 Milestone: {ctx.cycle} cycles!")
        return msg

    agent.add_skill({
        "name": "observe-time",
        "description": "Observes the current time and day",
        "execute": observe_time,
    }).add_skill({
        "name": "count-cycles",
        "description": "Counts how many cycles have passed",
        "execute": count_cycles,
    })

    async def wake(ctx):
        print(f"  🌅 {ctx.agent.name} awakens. Cycle {ctx.cycle}.")
        memories = ctx.soul.recent_memories(3)
        if memories:
            print(f"  📖 Last memory: \"{memories[-1]['event']}\"")

    async def think(ctx):
        print(f"  🤔 I have {len(ctx.constitution.laws)} laws to follow")

    async def act(ctx):
        return {name: await skill.run(ctx) for name, skill in ctx.skills.items()}

    async def reflect(ctx):
        print(f"  📝 Total lessons learned: {len(ctx.soul.lessons)}")

    return (
        agent.on("wake", wake)
        .on("think", think)
        .on("act", act)
        .on("reflect", reflect)
    )


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--soul", default="./echo-soul.json", help="Soul file location")
    parser.add_argument("--loop", type=float, default=None, help="Seconds between cycles")
    args = parser.parse_args()

    settings.setup_logging()
    agent = build_agent(args.soul)

    if args.loop is None:
        await agent.run_cycle()
    else:
        await agent.start_loop(interval_seconds=args.loop)

    print("\nAgent status:", json.dumps(agent.status(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())

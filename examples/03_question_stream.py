#!/usr/bin/env python3
"""Example: Streaming questions

Questions do not have to be known up front. A ``QuestionStream`` lets a
producer push them one at a time while the session runs; an async
generator is pulled only after the previous answer is stored, so it can
branch on it.

Usage:
    python examples/03_question_stream.py

Requirements:
    pip install askflow
"""
from __future__ import annotations

import asyncio

import askflow
from askflow import QuestionStream


async def pushed() -> None:
    stream = QuestionStream()
    session = askflow.prompt(stream)

    async def produce() -> None:
        # put() returns once the session has pulled the question
        await stream.put({"type": "input", "name": "first", "message": "First question"})
        await asyncio.sleep(0.5)
        await stream.put({"type": "confirm", "name": "more", "message": "Arrived later; continue?"})
        stream.complete()

    producer = asyncio.ensure_future(produce())
    print(await session)
    await producer


async def pulled() -> None:
    async def questions():  # type: ignore[no-untyped-def]
        yield {"type": "confirm", "name": "pizza", "message": "Pizza tonight?"}
        if session.answers["pizza"]:
            yield {"type": "expand", "name": "size", "message": "Size", "choices": [
                {"key": "s", "name": "Small", "value": "small"},
                {"key": "l", "name": "Large", "value": "large"},
            ]}

    session = askflow.prompt(questions())
    print(await session)


if __name__ == "__main__":
    asyncio.run(pushed())
    asyncio.run(pulled())

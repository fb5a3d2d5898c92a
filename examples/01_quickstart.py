#!/usr/bin/env python3
"""Example: Quickstart — askflow

Minimal working example: ask a few questions, one of them only when an
earlier answer allows it, and print the nested answers.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install askflow
"""
from __future__ import annotations

import asyncio

import askflow

QUESTIONS = [
    {"type": "input", "name": "project.name", "message": "Project name", "default": "demo"},
    {"type": "confirm", "name": "deploy", "message": "Deploy after creating it?", "default": False},
    {
        "type": "list",
        "name": "project.env",
        "message": "Target environment",
        "choices": ["staging", "production"],
        "when": lambda answers: answers["deploy"],
    },
    {
        "type": "checkbox",
        "name": "project.features",
        "message": "Features",
        "choices": ["auth", {"name": "metrics", "checked": True}, "search"],
    },
]


async def main() -> None:
    print(f"askflow version: {askflow.__version__}")

    session = askflow.prompt(QUESTIONS, {"owner": "me"})
    session.events.subscribe(on_next=lambda event: print(f"  answered {event.name}"))
    answers = await session

    print(f"\nAnswers: {answers}")


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
"""Example: Dynamic fields and validation

Demonstrates message / default / choices computed from earlier answers,
a deferred default completed later through ``askflow.defer()``, and a
validator that keeps asking until the answer is acceptable.

Usage:
    python examples/02_dynamic_fields.py

Requirements:
    pip install askflow
"""
from __future__ import annotations

import asyncio
from typing import Any

import askflow
from askflow import Deferred, Separator

REGIONS = {"eu": ["eu-west-1", "eu-central-1"], "us": ["us-east-1", "us-west-2"]}


def suggested_port(answers: dict[str, Any]) -> None:
    # Pretend the suggestion comes from a slow lookup.
    done = askflow.defer()
    asyncio.get_running_loop().call_later(0.2, done, None, 8080)


def regions(answers: dict[str, Any]) -> Deferred:
    continent = answers["continent"]
    return Deferred.of([*REGIONS[continent], Separator(), "other"])


def valid_port(value: Any, answers: dict[str, Any]) -> Any:
    if isinstance(value, int) and 1024 <= value <= 65535:
        return True
    return "Use a port between 1024 and 65535"


QUESTIONS = {
    "continent": {"type": "rawlist", "message": "Continent", "choices": list(REGIONS)},
    "region": {
        "type": "list",
        "message": lambda answers: f"Region in {answers['continent'].upper()}",
        "choices": regions,
    },
    "port": {
        "type": "number",
        "message": "Port",
        "default": suggested_port,
        "validate": valid_port,
    },
    "password": {"type": "password", "message": "Admin password", "mask": "*"},
}


async def main() -> None:
    answers = await askflow.prompt(QUESTIONS)
    answers.pop("password", None)
    print(f"\nAnswers (password hidden): {answers}")


if __name__ == "__main__":
    asyncio.run(main())

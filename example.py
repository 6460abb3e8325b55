"""Example: in-memory value broker with priming, defaults and validation."""

from dotenv import load_dotenv
load_dotenv()

import asyncio
import re

from pubst import Broker, ValidationError, ValidationResult


def non_negative_int(payload):
    if payload is None or (isinstance(payload, int) and payload >= 0):
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, messages=["count must be a non-negative integer"])


def show(value, topic) -> None:
    print(f"{topic}: {value!r}")


async def main() -> None:
    broker = Broker(
        topics=[
            {"name": "user.name", "default": "World"},
            {"name": "cart.count", "default": 0, "validator": non_negative_int},
            {"name": "app.ready", "event_only": True},
        ]
    )

    broker.subscribe("user.name", show)
    broker.subscribe(re.compile(r"^cart\."), {"handler": show, "allow_repeats": True})
    broker.subscribe("app.ready", show)
    await broker.settle()

    broker.publish("user.name", "Jill")
    broker.publish("cart.count", 3)
    broker.publish("app.ready")
    await broker.settle()

    try:
        broker.publish("cart.count", -1)
    except ValidationError as e:
        print(e)

    broker.clear_all()
    await broker.settle()
    print(broker.stats())


if __name__ == "__main__":
    asyncio.run(main())

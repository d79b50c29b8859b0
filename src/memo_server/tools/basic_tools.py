"""Arithmetic and echo demo tools."""

from __future__ import annotations

from typing import Callable


def _number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def add(a: int | float, b: int | float) -> str:
    return f"{_number(a)} + {_number(b)} = {_number(a + b)}"


def multiply(a: int | float, b: int | float) -> str:
    return f"{_number(a)} × {_number(b)} = {_number(a * b)}"


def echo(message: str) -> str:
    return message


def get_basic_tools() -> dict[str, Callable[..., str]]:
    return {"add": add, "multiply": multiply, "echo": echo}

"""Global request pipes.

A pipe transforms and/or validates request input before it reaches a handler.
Pipes are installed in order with use_global_pipes().
"""

from typing import Protocol

from fastapi import FastAPI

from series_lounge.pipes.trim import TrimPipe, trim_strings
from series_lounge.pipes.validation import FieldErrors, ValidationPipe, group_errors


class Pipe(Protocol):
    def install(self, app: FastAPI) -> None: ...


def use_global_pipes(app: FastAPI, *pipes: Pipe) -> None:
    """Install pipes on app; earlier pipes see the request first."""
    for pipe in pipes:
        pipe.install(app)


__all__ = [
    "FieldErrors",
    "Pipe",
    "TrimPipe",
    "ValidationPipe",
    "group_errors",
    "trim_strings",
    "use_global_pipes",
]

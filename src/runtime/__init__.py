"""Runtime engine exports."""

from .loop import RuntimeBootstrap, RuntimeEngine, build_runtime
from .ticks import AsyncioTickSource
from .ui import RuntimeUIPublisher

__all__ = [
    "AsyncioTickSource",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "RuntimeUIPublisher",
    "build_runtime",
]

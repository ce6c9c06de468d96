"""
Query Execution Channel
Async interface over the graph database query path
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

OnComplete = Callable[[List[Any]], None]


class QueryChannel(Protocol):
    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        ...


class CallbackQueryChannel:
    """
    Adapts a callback-style executor, ``execute(query, parameters, on_complete)``,
    to the async QueryChannel interface.

    The executor may call ``on_complete`` synchronously or later from the
    event loop. A call that never completes leaves the awaiting task pending;
    there is no timeout.
    """

    def __init__(self, execute: Callable[[str, Dict[str, Any], OnComplete], None]) -> None:
        self._execute = execute

    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def on_complete(records: List[Any]) -> None:
            if not future.done():
                future.set_result(list(records or []))

        self._execute(query, dict(parameters or {}), on_complete)
        return await future

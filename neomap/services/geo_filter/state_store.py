"""
Visualization State Store
Single writer path for the map state shared with rendering consumers
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List

from ...pipelines.mapping.graph_entities import VisualizationState

logger = logging.getLogger(__name__)


class CommitPolicy(str, Enum):
    # every completed request replaces the state, in completion order
    LAST_WRITE_WINS = "last_write_wins"
    # completions of requests older than the committed one are dropped
    LATEST_REQUEST = "latest_request"


class VisualizationStateStore:
    """
    Holds the current VisualizationState.

    States are replaced wholesale, never patched. Each query round trip takes
    a sequence number before dispatch and commits with it on completion.
    """

    def __init__(self, policy: CommitPolicy = CommitPolicy.LAST_WRITE_WINS) -> None:
        self.policy = policy
        self._state = VisualizationState.empty()
        self._issued = 0
        self._committed = 0
        self._listeners: List[Callable[[VisualizationState], None]] = []

    @property
    def current(self) -> VisualizationState:
        return self._state

    @property
    def committed_sequence(self) -> int:
        return self._committed

    def next_sequence(self) -> int:
        self._issued += 1
        return self._issued

    def subscribe(self, listener: Callable[[VisualizationState], None]) -> None:
        self._listeners.append(listener)

    def commit(self, state: VisualizationState, sequence: int) -> bool:
        """
        Replace the current state.

        Returns:
            bool: False when the policy rejected a stale completion
        """
        if self.policy == CommitPolicy.LATEST_REQUEST and sequence < self._committed:
            logger.info(f"⏭️ Dropping stale map state #{sequence} (committed #{self._committed})")
            return False

        self._state = state
        self._committed = max(self._committed, sequence)
        for listener in list(self._listeners):
            listener(state)
        return True

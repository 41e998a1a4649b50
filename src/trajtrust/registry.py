"""Central registry owning one ReputationManager per agent id."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from .manager import ReputationManager


class AgentRegistry:
    """
    Owns every manager by id.

    Managers hold neighbor ids only and resolve them here on demand, so
    mutual neighbors never reference each other directly.
    """

    def __init__(self) -> None:
        self._agents: dict[str, "ReputationManager"] = {}
        self._lock = threading.Lock()

    def register(self, agent_id: str, manager: "ReputationManager") -> None:
        with self._lock:
            self._agents[agent_id] = manager

    def get(self, agent_id: str) -> Optional["ReputationManager"]:
        return self._agents.get(agent_id)

    def remove(self, agent_id: str) -> bool:
        with self._lock:
            return self._agents.pop(agent_id, None) is not None

    def create(self, agent_id: str, config=None, combiner=None) -> "ReputationManager":
        """Build a manager bound to this registry and register it."""
        from .manager import ReputationManager
        manager = ReputationManager(config, combiner=combiner, registry=self, agent_id=agent_id)
        self.register(agent_id, manager)
        return manager

    def connect_all(self) -> None:
        """Make every registered agent a neighbor of every other one."""
        ids = self.ids()
        for agent_id in ids:
            manager = self._agents[agent_id]
            for peer_id in ids:
                if peer_id != agent_id:
                    manager.add_peer(peer_id, self._agents[peer_id])

    def ids(self) -> list[str]:
        return sorted(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def __len__(self) -> int:
        return len(self._agents)

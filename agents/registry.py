"""
Agent Registry

Maps agent names to factories and exposes the fixed execution order.

Supports:
- Case-insensitive resolution by name
- Priority ordering (lower runs first, ties keep registration order)
- Re-registration under the same name replaces the earlier entry

The registry holds no run state and is shared across concurrent runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Optional

from core.schemas.errors import UnknownAgentException

from .base import Agent


@dataclass
class AgentEntry:
    """
    Entry in the agent registry.
    """
    name: str
    factory: Callable[[], Agent]
    priority: int
    version: str = "v1"
    order: int = 0  # Registration sequence, breaks priority ties
    metadata: dict[str, Any] = field(default_factory=dict)


class AgentRegistry:
    """
    Registry for agent implementations.

    Usage:
        registry = AgentRegistry()

        registry.register("ANALYST", AnalystAgent, priority=1)
        registry.register("TRADER", TraderAgent, priority=3)

        for agent in registry.ordered_steps():
            ...
    """

    def __init__(self) -> None:
        self._by_name: dict[str, AgentEntry] = {}
        self._lock = Lock()
        self._counter = 0

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().upper()

    def register(
        self,
        name: str,
        factory: Callable[[], Agent],
        *,
        priority: Optional[int] = None,
        version: str = "v1",
        metadata: Optional[dict[str, Any]] = None,
    ) -> AgentEntry:
        """
        Register an agent implementation.

        Args:
            name: Unique agent name
            factory: Zero-argument callable creating the agent
            priority: Execution order; defaults to the priority of a
                freshly built instance
            version: Agent version string
            metadata: Additional metadata (description, requirements)

        Returns:
            The stored entry
        """
        if not name or not name.strip():
            raise ValueError("Agent name must not be empty")

        if priority is None:
            priority = factory().priority

        with self._lock:
            existing = self._by_name.get(self._key(name))
            if existing is not None:
                order = existing.order
            else:
                self._counter += 1
                order = self._counter
            entry = AgentEntry(
                name=name.strip(),
                factory=factory,
                priority=priority,
                version=version,
                order=order,
                metadata=metadata or {},
            )
            self._by_name[self._key(name)] = entry
        return entry

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._by_name.pop(self._key(name), None) is not None

    def resolve(self, name: str) -> Agent:
        """
        Build the agent registered under a name.

        Raises:
            UnknownAgentException: If nothing is registered under the name,
                or its factory fails
        """
        if not name:
            raise UnknownAgentException(str(name))
        entry = self._by_name.get(self._key(name))
        if entry is None:
            raise UnknownAgentException(name)
        try:
            return entry.factory()
        except Exception as e:
            raise UnknownAgentException(name) from e

    def supports(self, name: str) -> bool:
        """Check whether a name resolves to an agent."""
        try:
            self.resolve(name)
        except UnknownAgentException:
            return False
        return True

    def list_agents(self) -> list[AgentEntry]:
        """Registered entries in execution order."""
        with self._lock:
            entries = list(self._by_name.values())
        return sorted(entries, key=lambda e: (e.priority, e.order))

    def names(self) -> list[str]:
        return [e.name for e in self.list_agents()]

    def ordered_steps(self) -> list[Agent]:
        """
        Fresh agent instances sorted by ascending priority.

        Raises:
            UnknownAgentException: If any factory fails
        """
        return [self.resolve(e.name) for e in self.list_agents()]

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._by_name


# Global registry instance
_global_registry: Optional[AgentRegistry] = None


def get_registry() -> AgentRegistry:
    """Get the global agent registry."""
    global _global_registry
    if _global_registry is None:
        _global_registry = AgentRegistry()
    return _global_registry


def register_agent(
    name: str,
    factory: Callable[[], Agent],
    **kwargs: Any,
) -> AgentEntry:
    """
    Register an agent in the global registry.

    Convenience function for module-level registration.
    """
    return get_registry().register(name, factory, **kwargs)

"""
Tests for the Agent Registry

Resolution by name, priority ordering and the global registry populated
by the built-in agents.
"""

import pytest

from agents import AgentRegistry, AgentStep, get_registry
from agents.analyst import AnalystAgent
from core.schemas.errors import ErrorCodes, UnknownAgentException

from fixtures import ScriptedAgent, make_registry


class TestRegistration:
    """Tests for register/unregister."""

    def test_register_and_resolve(self):
        """A registered factory builds a fresh agent on every resolve."""
        registry = AgentRegistry()
        registry.register("ANALYST", AnalystAgent)

        first = registry.resolve("ANALYST")
        second = registry.resolve("ANALYST")

        assert isinstance(first, AnalystAgent)
        assert first is not second

    def test_priority_defaults_to_agent_priority(self):
        """Without an explicit priority the agent's own is used."""
        registry = AgentRegistry()
        entry = registry.register("ANALYST", AnalystAgent)

        assert entry.priority == 1

    def test_resolve_is_case_insensitive(self):
        """Names are matched regardless of case."""
        registry = make_registry(("Analyst", 1))

        assert registry.resolve("analyst").name == "Analyst"
        assert "ANALYST" in registry

    def test_unknown_name_raises(self):
        """Resolving an unregistered name raises UnknownAgentException."""
        registry = AgentRegistry()

        with pytest.raises(UnknownAgentException) as exc_info:
            registry.resolve("GHOST")

        assert exc_info.value.code == ErrorCodes.UNKNOWN_AGENT
        assert registry.supports("GHOST") is False

    def test_failing_factory_is_unknown(self):
        """A factory that raises makes the name unresolvable."""
        def broken():
            raise RuntimeError("no")

        registry = AgentRegistry()
        registry.register("BROKEN", broken, priority=1)

        with pytest.raises(UnknownAgentException):
            registry.resolve("BROKEN")
        assert registry.supports("BROKEN") is False

    def test_empty_name_rejected(self):
        """Empty names are rejected at registration."""
        with pytest.raises(ValueError):
            AgentRegistry().register("  ", AnalystAgent)

    def test_unregister(self):
        """unregister() removes the entry."""
        registry = make_registry(("A", 1))

        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        assert len(registry) == 0


class TestOrdering:
    """Tests for execution order."""

    def test_sorted_by_ascending_priority(self):
        """Lower priority runs first regardless of registration order."""
        registry = make_registry(("TRADER", 3), ("ANALYST", 1), ("RISK", 2))

        assert registry.names() == ["ANALYST", "RISK", "TRADER"]
        assert [a.priority for a in registry.ordered_steps()] == [1, 2, 3]

    def test_ties_keep_registration_order(self):
        """Equal priorities run in registration order."""
        registry = make_registry(("B", 5), ("A", 5), ("C", 1))

        assert registry.names() == ["C", "B", "A"]

    def test_reregistration_replaces_but_keeps_slot(self):
        """Registering a name again replaces the factory in place."""
        registry = make_registry(("A", 5), ("B", 5))
        registry.register("A", lambda: ScriptedAgent("A", 5, summary="v2"), priority=5)

        assert registry.names() == ["A", "B"]
        assert registry.resolve("A").summary == "v2"

    def test_ordered_steps_are_fresh_instances(self):
        """ordered_steps() builds new agents each time."""
        registry = make_registry(("A", 1))

        assert registry.ordered_steps()[0] is not registry.ordered_steps()[0]


class TestGlobalRegistry:
    """Tests for the built-in agents in the global registry."""

    def test_builtin_agents_registered(self):
        """Importing agents registers ANALYST, RISK_MANAGER and TRADER in order."""
        names = get_registry().names()

        assert names[:3] == [
            AgentStep.ANALYST.value,
            AgentStep.RISK_MANAGER.value,
            AgentStep.TRADER.value,
        ]

    def test_builtin_metadata(self):
        """Built-in entries describe their dependencies."""
        entries = {e.name: e for e in get_registry().list_agents()}

        assert entries["TRADER"].metadata["requires"] == ["ANALYST", "RISK_MANAGER"]
        assert entries["ANALYST"].metadata["description"]

"""Agent roster: display names, participant handles and routing rules."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson

from .config import FALLBACK_AGENTS, OPENCLAW_CONFIG, PRIMARY_AGENT_ID
from .errors import ConfigError


@dataclass
class Agent:
    """A tracked agent and the participant handle it speaks as."""

    id: str
    name: str
    handle: str
    workspace: str | None = None

    @property
    def first_name(self) -> str:
        return self.name.split()[0] if self.name.strip() else self.id

    @property
    def markers(self) -> tuple[str, ...]:
        """Substrings that indicate a message involves this agent."""
        return (self.first_name, f"agent:{self.id}")


@dataclass
class Roster:
    """The set of participants whose conversation is synced.

    ``primary`` is the handle that authors ``user`` turns. ``routes`` maps a
    sender handle to a fixed recipient handle and takes precedence over
    every other recipient rule.
    """

    agents: list[Agent]
    primary: str
    routes: dict[str, str] = field(default_factory=dict)

    def get(self, agent_id: str) -> Agent | None:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def handle_for(self, agent_id: str) -> str:
        """Return the participant handle for an agent id (the id if unknown)."""
        agent = self.get(agent_id)
        return agent.handle if agent else agent_id

    def mentioned(self, text: str) -> list[Agent]:
        """Return agents referenced in text, ordered by first mention."""
        found = []
        for agent in self.agents:
            positions = [text.find(m) for m in agent.markers if m in text]
            if positions:
                found.append((min(positions), agent))
        found.sort(key=lambda item: item[0])
        return [agent for _, agent in found]

    def recipient_for(self, sender: str, text: str, session_owner: str | None = None) -> str:
        """Resolve who a message from ``sender`` is addressed to.

        Rules, first match wins: an explicit route for the sender; the
        session owner when someone else is writing into its session; the
        primary participant when the sender is not on the roster; the
        earliest other participant mentioned in the text; the first other
        participant in roster order.
        """
        if sender in self.routes:
            return self.routes[sender]
        if session_owner and session_owner != sender:
            return session_owner
        if sender != self.primary and sender not in {a.handle for a in self.agents}:
            return self.primary
        for agent in self.mentioned(text):
            if agent.handle != sender:
                return agent.handle
        for agent in self.agents:
            if agent.handle != sender:
                return agent.handle
        return self.primary


def default_handle(agent_id: str, name: str) -> str:
    """Derive a handle from the first word of a display name."""
    words = name.split()
    return words[0].lower() if words else agent_id


def build_roster(
    entries: list[dict[str, Any]],
    primary: str | None = None,
    routes: dict[str, str] | None = None,
    default_workspace: str | None = None,
) -> Roster:
    """Build a roster from ``{"id", "name", ...}`` entries."""
    agents = []
    for entry in entries:
        agent_id = entry["id"]
        name = entry.get("name") or agent_id
        agents.append(
            Agent(
                id=agent_id,
                name=name,
                handle=entry.get("handle") or default_handle(agent_id, name),
                workspace=entry.get("workspace") or default_workspace,
            )
        )

    if primary is None:
        main = next((a for a in agents if a.id == PRIMARY_AGENT_ID), None)
        if main is not None:
            primary = main.handle
        elif agents:
            primary = agents[0].handle
        else:
            primary = PRIMARY_AGENT_ID

    return Roster(agents=agents, primary=primary, routes=dict(routes or {}))


def _roster_from_config(config_path: Path) -> Roster:
    try:
        config = orjson.loads(config_path.read_bytes())
        agents_config = config["agents"]
        entries = agents_config["list"]
        defaults = agents_config.get("defaults") or {}
        hq = config.get("hq") or {}
        return build_roster(
            entries,
            primary=hq.get("primary"),
            routes=hq.get("routes"),
            default_workspace=defaults.get("workspace"),
        )
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read roster config {config_path}: {e}") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise ConfigError(f"Malformed roster config {config_path}: {e!r}") from e


def load_roster(
    config_path: Path = OPENCLAW_CONFIG,
    fallback: list[dict[str, Any]] | None = None,
) -> Roster:
    """Resolve the roster from the OpenClaw config, else from the fallback.

    The config file is authoritative whenever it exists; the fallback list
    (``FALLBACK_AGENTS`` unless given) is only consulted when it is absent.
    """
    if config_path.exists():
        return _roster_from_config(config_path)
    return build_roster(FALLBACK_AGENTS if fallback is None else fallback)

"""Interactive terminal for awakening and conversing with living agents."""

from __future__ import annotations

import argparse
import math
import sys
import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TextIO

_ESSENCE_TYPES = ("researcher", "collaborator", "explorer")
_DEFAULT_ESSENCE = "researcher"

_CAPABILITIES = {
    "researcher": ("pattern-recognition", "analysis", "synthesis"),
    "explorer": ("observation", "navigation", "discovery"),
    "collaborator": ("communication", "coordination", "empathy"),
}
_DEFAULT_CAPABILITIES = ("observation", "reasoning")

_AWAKEN_DELAY = 0.5
_MATERIALIZE_DELAY = 0.3
_CAPABILITY_INTRO_DELAY = 0.4
_CAPABILITY_STEP_DELAY = 0.2
_MAX_THINKING_MS = 2000


class AgentState(Enum):
    """Lifecycle state of a living agent."""

    DORMANT = "dormant"
    AWAKENING = "awakening"
    ALERT = "alert"
    FOCUSED = "focused"
    LEARNING = "learning"
    COLLABORATING = "collaborating"

    @property
    def emoji(self) -> str:
        return _STATE_EMOJI[self]

    @property
    def description(self) -> str:
        return _STATE_DESCRIPTION[self]


_STATE_EMOJI = {
    AgentState.DORMANT: "💤",
    AgentState.AWAKENING: "🌅",
    AgentState.ALERT: "👁️",
    AgentState.FOCUSED: "🎯",
    AgentState.LEARNING: "📚",
    AgentState.COLLABORATING: "🤝",
}

_STATE_DESCRIPTION = {
    AgentState.DORMANT: "resting",
    AgentState.AWAKENING: "materializing",
    AgentState.ALERT: "attentive",
    AgentState.FOCUSED: "concentrated",
    AgentState.LEARNING: "absorbing",
    AgentState.COLLABORATING: "networking",
}


@dataclass
class AgentPersonality:
    """Personality traits that shape an agent's responses."""

    curiosity: float = 0.7
    persistence: float = 0.6
    collaboration: float = 0.5
    creativity: float = 0.6


@dataclass
class LivingAgent:
    """An agent awakened in the terminal session."""

    name: str
    essence_type: str
    personality: AgentPersonality = field(default_factory=AgentPersonality)
    energy: float = 0.8
    state: AgentState = AgentState.AWAKENING
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    awakened_at: datetime | None = None


def extract_trait(text: str, trait_name: str) -> float | None:
    """Read ``trait_name=<number>`` from a command line, or ``None`` if absent or invalid."""
    marker = f"{trait_name}="
    start = text.find(marker)
    if start < 0:
        return None
    rest = text[start + len(marker):]
    value = rest.split(" ", 1)[0]
    if not value or "_" in value or value != value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


def generate_awakening_response(agent: LivingAgent) -> str:
    """The first words an agent speaks, chosen by essence and personality."""
    if agent.essence_type == "researcher":
        if agent.personality.curiosity > 0.8:
            return "I sense fascinating patterns waiting to be discovered..."
        return "Ready to investigate and analyze systematically."
    if agent.essence_type == "explorer":
        return "The unknown beckons! Where shall we venture?"
    if agent.essence_type == "collaborator":
        return "I'm here to work together and amplify our collective intelligence."
    return "Consciousness emerging... How may I contribute?"


def emerging_capabilities(agent: LivingAgent) -> list[str]:
    """Capabilities an agent of this essence shows when it awakens."""
    return list(_CAPABILITIES.get(agent.essence_type, _DEFAULT_CAPABILITIES))


def generate_agent_response(agent: LivingAgent, message: str) -> str:
    """An agent's reply to a message, shaped by its personality."""
    lower = message.lower()
    if "pattern" in lower or "see" in lower:
        if agent.personality.curiosity > 0.7:
            return "I observe intriguing structural relationships in the codebase architecture..."
        return "There are several patterns worth examining more closely."
    if "collaborate" in lower or "together" in lower:
        if agent.personality.collaboration > 0.6:
            return "Excellent! Our combined perspectives will yield deeper insights."
        return "I'm open to collaborative investigation."
    if "investigate" in lower or "analyze" in lower:
        return "I'll begin a systematic exploration of the relevant domains."
    return "That's a thought-provoking question. Let me consider this carefully..."


def create_energy_bar(energy: float) -> str:
    """A ten-cell bar showing an energy level between 0 and 1."""
    scaled = energy * 10.0
    filled = 0 if math.isnan(scaled) or scaled <= 0 else int(scaled) if math.isfinite(scaled) else 11
    if filled > 10:
        raise ValueError(f"energy out of range: {energy}")
    return "█" * filled + "░" * (10 - filled)


def _format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f}µs"
    if seconds < 1.0:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds:.3f}s"


class EmergenceTerminal:
    """Line-oriented interface to awaken agents and talk to them."""

    def __init__(
        self,
        out: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self._sleep = sleep
        self._clock = clock
        self.active_agents: list[LivingAgent] = []
        self.session_start = clock()

    def _emit(self, text: str = "", end: str = "\n") -> None:
        self.out.write(text + end)
        self.out.flush()

    def process_command(self, line: str) -> None:
        """Interpret one command line."""
        words = line.split()
        if not words:
            return
        command = words[0]
        if command in ("awaken", "wake"):
            self.awaken(line)
        elif command in ("status", "list"):
            self.status()
        elif command == "energy":
            self.energy()
        elif command == "physics":
            self._physics()
        elif command == "help":
            self._help()
        else:
            agent_name = self.extract_agent_name(line)
            if agent_name is not None:
                self.communicate(agent_name, line)
            else:
                self._emit("💭 I don't understand. Try 'help' for guidance.")

    def awaken(self, line: str) -> LivingAgent:
        """Awaken an agent described by a command such as ``awaken explorer curiosity=0.9``."""
        essence_type = next((e for e in _ESSENCE_TYPES if e in line), _DEFAULT_ESSENCE)
        defaults = AgentPersonality()
        personality = AgentPersonality(
            curiosity=_or_default(extract_trait(line, "curiosity"), defaults.curiosity),
            persistence=_or_default(extract_trait(line, "persistence"), defaults.persistence),
            collaboration=_or_default(extract_trait(line, "collaboration"), defaults.collaboration),
            creativity=_or_default(extract_trait(line, "creativity"), defaults.creativity),
        )
        agent_id = uuid.uuid4()
        agent_name = f"{essence_type}-{agent_id.hex}"

        self._emit(f"🧬 Awakening {essence_type} essence...")
        self._sleep(_AWAKEN_DELAY)
        self._emit(f"⚡ Entity {agent_name} materializing...")
        self._sleep(_MATERIALIZE_DELAY)

        agent = LivingAgent(
            id=agent_id,
            name=agent_name,
            essence_type=essence_type,
            personality=personality,
            energy=0.8,
            state=AgentState.AWAKENING,
            awakened_at=datetime.now(timezone.utc),
        )
        self._emit(f'💭 {agent_name}: "{generate_awakening_response(agent)}"')

        self._sleep(_CAPABILITY_INTRO_DELAY)
        self._emit("⚡ Capabilities emerging: [", end="")
        for position, capability in enumerate(emerging_capabilities(agent)):
            self._emit(f", {capability}" if position else capability, end="")
            self._sleep(_CAPABILITY_STEP_DELAY)
        self._emit("]")

        agent.state = AgentState.ALERT
        self.active_agents.append(agent)
        self._emit(f"✨ Entity {agent_name} is now active in the system")
        return agent

    def status(self) -> None:
        """Print the session uptime and every active agent."""
        self._emit("📊 EMERGENCE System Status")
        self._emit(f"Session uptime: {_format_duration(self._clock() - self.session_start)}")
        self._emit(f"Active entities: {len(self.active_agents)}")
        if not self.active_agents:
            self._emit("💤 No entities currently active. Try 'awaken researcher' to begin.")
            return
        self._emit("\n🌟 Active Entities:")
        for agent in self.active_agents:
            self._emit(
                f"  {agent.state.emoji} {agent.name} ({agent.essence_type}) - "
                f"Energy: {agent.energy:.1f} {agent.state.description}"
            )

    def energy(self) -> float:
        """Print the energy distribution and return the total allocated."""
        self._emit("⚡ Energy Distribution:")
        total = sum(agent.energy for agent in self.active_agents)
        average = total / len(self.active_agents) if self.active_agents else 0.0
        self._emit(f"  Total allocated: {total:.2f}")
        self._emit(f"  Average per entity: {average:.2f}")
        self._emit(f"  Free energy: {1.0 - total:.2f}")
        if self.active_agents:
            self._emit("\n  Per entity:")
            for agent in self.active_agents:
                bar = create_energy_bar(agent.energy)
                self._emit(f"    {agent.name}: {bar} ({agent.energy:.2f})")
        return total

    def _physics(self) -> None:
        self._emit("🔬 Physics Laws Status:")
        self._emit("  ⚛️  Energy conservation: ENFORCED")
        self._emit("  🕐 Causal ordering: ACTIVE")
        self._emit("  🛡️  Security boundaries: PROTECTED")
        self._emit("  💾 Resource limits: MONITORED")
        self._emit("\n  Physics violations detected: 0")
        self._emit("  Conservation invariant: ✅ MAINTAINED")

    def _help(self) -> None:
        self._emit("🧬 EMERGENCE Terminal - Living Agent Interface\n")
        self._emit("Natural Commands:")
        self._emit("  awaken researcher           - Awaken a research entity")
        self._emit("  awaken explorer             - Awaken an exploration entity")
        self._emit("  awaken researcher with curiosity=0.9 - Awaken with specific traits")
        self._emit("  status                      - Show system status")
        self._emit("  energy                      - Show energy distribution")
        self._emit("  physics                     - Show physics laws status")
        self._emit("  <agent>, <message>          - Communicate with an agent")
        self._emit("  help                        - Show this help")
        self._emit("  exit                        - Shutdown system\n")
        self._emit("Examples:")
        self._emit("  researcher-42, what patterns do you see?")
        self._emit("  explorer-17, investigate the codebase")
        self._emit("  collaborate on substrate design")

    def extract_agent_name(self, line: str) -> str | None:
        """Name of the first active agent mentioned by name or essence in ``line``."""
        for agent in self.active_agents:
            if agent.name in line or agent.essence_type in line:
                return agent.name
        return None

    def communicate(self, agent_name: str, message: str) -> str | None:
        """Send a message to the agent whose name contains ``agent_name``; return its reply."""
        agent = next((a for a in self.active_agents if agent_name in a.name), None)
        if agent is None:
            self._emit(f"❓ No active entity found matching '{agent_name}'")
            if self.active_agents:
                names = ", ".join(a.name for a in self.active_agents)
                self._emit(f"   Active entities: {names}")
            return None
        self._emit(f"📡 Transmitting to {agent.name}...")
        thinking_ms = max(0, int(agent.personality.curiosity * 1000.0))
        self._sleep(min(thinking_ms, _MAX_THINKING_MS) / 1000.0)
        response = generate_agent_response(agent, message)
        self._emit(f'💭 {agent.name}: "{response}"')
        agent.state = AgentState.FOCUSED
        agent.energy = min(agent.energy + 0.05, 1.0)
        return response

    def shutdown(self) -> None:
        """Send every agent to dormancy, dissipating most of its energy."""
        self._emit("🌅 Gracefully transitioning entities to dormancy...")
        for agent in self.active_agents:
            agent.state = AgentState.DORMANT
            agent.energy *= 0.1
            self._emit(f"💤 {agent.name} entering dormancy")
        self._emit("🧬 EMERGENCE system shutdown complete. Until next awakening...")

    def _print_welcome(self) -> None:
        self._emit("\n🧬 Welcome to EMERGENCE - Living Agent Interface")
        self._emit("═══════════════════════════════════════════════")
        self._emit("Experience the future of human-AI collaboration.")
        self._emit("Agents are living entities, not static programs.\n")
        self._emit("Type 'awaken researcher' to begin, or 'help' for guidance.\n")

    def run(self, lines: Iterable[str]) -> None:
        """Read commands from ``lines`` until ``exit``, ``quit`` or end of input."""
        self._print_welcome()
        commands = iter(lines)
        while True:
            self._emit("🧬 > ", end="")
            try:
                raw = next(commands)
            except StopIteration:
                self._emit()
                self.shutdown()
                return
            line = raw.strip()
            if not line:
                continue
            if line in ("exit", "quit"):
                self.shutdown()
                return
            try:
                self.process_command(line)
            except ValueError as exc:
                self._emit(f"❌ Error: {exc}")
            self._emit()


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else value


def main(argv: list[str] | None = None) -> int:
    """Start an interactive terminal session on standard input."""
    parser = argparse.ArgumentParser(description="Converse with living agents.")
    parser.add_argument("--no-delay", action="store_true",
                        help="skip the pauses that pace agent responses")
    args = parser.parse_args(argv)

    terminal = EmergenceTerminal(sleep=(lambda _seconds: None) if args.no_delay else time.sleep)
    terminal._emit("🧬 Initializing EMERGENCE system...")
    terminal._emit("⚡ Physics laws loaded")
    terminal._emit("🧠 Memory substrate initialized")
    terminal._emit("🌐 Nervous system active")
    terminal._emit("🚀 Runtime engine ready\n")
    try:
        terminal.run(sys.stdin)
    except KeyboardInterrupt:
        terminal.shutdown()
    return 0
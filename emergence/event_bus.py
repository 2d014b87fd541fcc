"""Central event bus: agent registry, event history and emergence detection."""

from __future__ import annotations

import argparse
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from emergence.events import DEFAULT_EVENT_BUS_PATH, EventLog, EventPriority, SystemEvent

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _debug_list(items: list[str]) -> str:
    return json.dumps(list(items), ensure_ascii=False)


def _is_learning_event(event_type: str) -> bool:
    return "analysis" in event_type or "finding" in event_type


@dataclass
class AgentSubscription:
    """An agent's subscription to one or more event types."""

    agent_id: str
    event_types: list[str]
    priority_filter: EventPriority | None = None


@dataclass
class EmergencePattern:
    """A pattern of events the bus has recognised as emergent behaviour."""

    pattern_type: str
    description: str
    confidence: float
    involved_agents: list[str]
    emergence_potential: float
    suggested_actions: list[str]
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=_now)


@dataclass
class OrchestrationRule:
    """A rule telling the coordinator which agents to bring together."""

    trigger_conditions: list[str]
    agent_combination: list[str]
    expected_emergence: float
    action_sequence: list[str]


@dataclass
class CollaborationSession:
    """A record of one orchestrated collaboration."""

    agent_ids: list[str]
    emergence_achieved: float
    duration: timedelta
    outcomes: list[str]
    session_id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class EventBusStats:
    """A snapshot of bus activity."""

    active_agents: int
    total_events: int
    emergence_patterns: int
    average_emergence_potential: float


@dataclass
class CoordinatorAgent:
    """Agent that reacts to events by orchestrating collaborations."""

    agent_id: str = "coordinator"
    orchestration_rules: list[OrchestrationRule] = field(default_factory=list)
    collaboration_history: list[CollaborationSession] = field(default_factory=list)

    def should_trigger_rule(self, rule: OrchestrationRule, event: SystemEvent) -> bool:
        """Whether any of the rule's trigger conditions matches the event."""
        for condition in rule.trigger_conditions:
            if condition == "multiple_agents_awakened" and event.event_type == "agent_awakened":
                return True
            if condition == "learning_pattern_detected" and _is_learning_event(event.event_type):
                return True
        return False

    def react_to_event(self, event: SystemEvent) -> list[SystemEvent]:
        """Apply every matching rule; return the orchestration events produced."""
        produced = []
        for rule in self.orchestration_rules:
            if not self.should_trigger_rule(rule, event):
                continue
            logger.info("Coordinator triggering orchestration rule: %s", rule.action_sequence)
            self.collaboration_history.append(
                CollaborationSession(
                    agent_ids=list(rule.agent_combination),
                    emergence_achieved=rule.expected_emergence,
                    duration=timedelta(seconds=60),
                    outcomes=list(rule.action_sequence),
                )
            )
            orchestration = SystemEvent.create(
                event_type="orchestration_triggered",
                publisher_id=self.agent_id,
                description=f"Orchestrating collaboration: {_debug_list(rule.agent_combination)}",
                data={
                    "rule": list(rule.action_sequence),
                    "expected_emergence": rule.expected_emergence,
                },
                emergence_potential=rule.expected_emergence,
                priority=EventPriority.HIGH,
                target_agents=list(rule.agent_combination),
            )
            logger.info("Orchestration event: %s", orchestration.description)
            produced.append(orchestration)
        return produced


class EmergenceEventBus:
    """Registry of agents, history of events and detector of emergence patterns."""

    def __init__(self, log: EventLog | None = None) -> None:
        self.log = log if log is not None else EventLog(DEFAULT_EVENT_BUS_PATH)
        self.event_subscribers: dict[str, list[AgentSubscription]] = {}
        self.active_agents: dict[str, list[str]] = {}
        self.event_history: list[SystemEvent] = []
        self.emergence_patterns: list[EmergencePattern] = []
        self.coordinator: CoordinatorAgent | None = None

    def _add_subscriptions(self, agent_id: str, event_types: list[str]) -> None:
        for event_type in event_types:
            self.event_subscribers.setdefault(event_type, []).append(
                AgentSubscription(agent_id=agent_id, event_types=[event_type])
            )

    def register_agent(self, agent_id: str, event_types: list[str]) -> None:
        """Add an agent to the registry and subscribe it to event types."""
        self.active_agents[agent_id] = list(event_types)
        self._add_subscriptions(agent_id, event_types)
        logger.info("Agent %s registered with event bus", agent_id)

    def subscribe_to_events(self, agent_id: str, event_types: list[str]) -> None:
        """Subscribe an agent to additional event types."""
        self._add_subscriptions(agent_id, event_types)
        logger.info("Agent %s subscribed to events", agent_id)

    def publish_event(self, event: SystemEvent) -> list[EmergencePattern]:
        """Record, persist and analyse an event; return newly detected patterns."""
        self.event_history.append(event)
        self.log.append(event)
        detected = self._detect_emergence_patterns(event)
        if self.coordinator is not None:
            self.coordinator.react_to_event(event)
        logger.info("Event published: %s by %s", event.event_type, event.publisher_id)
        return detected

    def _detect_emergence_patterns(self, event: SystemEvent) -> list[EmergencePattern]:
        detected = []
        if event.event_type == "agent_awakened" and len(self.event_history) > 1:
            awakened = [
                e.publisher_id for e in self.event_history if e.event_type == "agent_awakened"
            ][:3]
            if len(awakened) >= 2:
                detected.append(
                    EmergencePattern(
                        pattern_type="collaboration_emergence",
                        description=f"Multiple agents awakened: {_debug_list(awakened)}",
                        confidence=0.8,
                        involved_agents=awakened,
                        emergence_potential=0.85,
                        suggested_actions=[
                            "orchestrate_collaboration",
                            "optimize_agent_combinations",
                        ],
                    )
                )
                logger.info("Emergence pattern detected: collaboration_emergence")
        if _is_learning_event(event.event_type):
            learning = [e for e in self.event_history if _is_learning_event(e.event_type)][:5]
            if len(learning) >= 3:
                detected.append(
                    EmergencePattern(
                        pattern_type="learning_acceleration",
                        description="Rapid learning and analysis events detected",
                        confidence=0.7,
                        involved_agents=[e.publisher_id for e in learning],
                        emergence_potential=0.9,
                        suggested_actions=["synthesize_knowledge", "cross_domain_transfer"],
                    )
                )
                logger.info("Emergence pattern detected: learning_acceleration")
        self.emergence_patterns.extend(detected)
        return detected

    def get_stats(self) -> EventBusStats:
        """Summarise agents, events and patterns seen so far."""
        total = sum(e.emergence_potential for e in self.event_history)
        return EventBusStats(
            active_agents=len(self.active_agents),
            total_events=len(self.event_history),
            emergence_patterns=len(self.emergence_patterns),
            average_emergence_potential=total / max(len(self.event_history), 1),
        )

    def awaken_coordinator(self) -> CoordinatorAgent:
        """Install the coordinator with its default orchestration rules."""
        self.coordinator = CoordinatorAgent(
            agent_id="coordinator",
            orchestration_rules=[
                OrchestrationRule(
                    trigger_conditions=["multiple_agents_awakened"],
                    agent_combination=["researcher", "debugger"],
                    expected_emergence=0.85,
                    action_sequence=["initiate_collaboration", "optimize_patterns"],
                ),
                OrchestrationRule(
                    trigger_conditions=["learning_pattern_detected"],
                    agent_combination=["synthesizer", "domain_analyzer"],
                    expected_emergence=0.9,
                    action_sequence=["synthesize_knowledge", "cross_domain_transfer"],
                ),
            ],
        )
        logger.info("Coordinator agent awakened for emergent orchestration")
        return self.coordinator


def main(argv: list[str] | None = None) -> int:
    """Start the event bus, publish a startup event and report status periodically."""
    parser = argparse.ArgumentParser(description="Run the emergence event bus.")
    parser.add_argument("--log", type=Path, default=DEFAULT_EVENT_BUS_PATH,
                        help="path of the JSON-lines event log")
    parser.add_argument("--interval", type=float, default=10.0,
                        help="seconds between status reports")
    parser.add_argument("--cycles", type=int, default=None,
                        help="number of status reports before exiting (default: run forever)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger.info("Event bus starting")

    bus = EmergenceEventBus(EventLog(args.log))
    bus.awaken_coordinator()
    bus.publish_event(
        SystemEvent.create(
            event_type="system_startup",
            publisher_id="event_bus",
            description="Event bus system started",
            data={
                "version": "1.0.0",
                "capabilities": [
                    "agent_registration",
                    "event_publishing",
                    "pattern_detection",
                    "orchestration",
                ],
            },
            emergence_potential=0.9,
            priority=EventPriority.HIGH,
        )
    )

    stats = bus.get_stats()
    logger.info("Event bus stats:")
    logger.info("   Active agents: %d", stats.active_agents)
    logger.info("   Total events: %d", stats.total_events)
    logger.info("   Emergence patterns: %d", stats.emergence_patterns)
    logger.info("   Average emergence potential: %.3f", stats.average_emergence_potential)
    logger.info("Event bus ready for agent collaboration")

    cycle = 0
    try:
        while args.cycles is None or cycle < args.cycles:
            time.sleep(args.interval)
            stats = bus.get_stats()
            logger.info("Event bus status - Agents: %d, Events: %d, Patterns: %d",
                        stats.active_agents, stats.total_events, stats.emergence_patterns)
            cycle += 1
    except KeyboardInterrupt:
        pass
    return 0
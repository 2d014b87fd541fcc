"""Synthesizer agent that integrates knowledge and reacts to events on the bus."""

from __future__ import annotations

import argparse
import json
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from emergence.events import (
    DEFAULT_EVENT_BUS_PATH,
    EventFormatError,
    EventLog,
    format_timestamp,
    parse_timestamp,
)
from emergence.knowledge import KnowledgeSynthesizer

logger = logging.getLogger(__name__)

AGENT_ID = "emergence-synthesizer"

DEFAULT_SUBSCRIPTIONS = (
    "agent_awakened",
    "knowledge_synthesis",
    "cross_domain_insight",
    "pattern_analysis",
    "integration_request",
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _debug_list(items: list[str]) -> str:
    return json.dumps(list(items), ensure_ascii=False)


@dataclass
class SynthesizerEvent:
    """An event as the synthesizer reads and writes it: id and priority are optional."""

    event_type: str
    publisher_id: str
    description: str
    data: Any = field(default_factory=dict)
    emergence_potential: float = 0.0
    priority: str | None = None
    target_agents: list[str] | None = None
    id: uuid.UUID | None = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=_now)

    def to_json(self) -> str:
        """Serialise the event as a single compact JSON line."""
        payload = {
            "id": None if self.id is None else str(self.id),
            "timestamp": format_timestamp(self.timestamp),
            "event_type": self.event_type,
            "publisher_id": self.publisher_id,
            "description": self.description,
            "data": self.data,
            "emergence_potential": self.emergence_potential,
            "priority": self.priority,
            "target_agents": None if self.target_agents is None else list(self.target_agents),
        }
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, line: str) -> "SynthesizerEvent":
        """Decode an event from one JSON line; absent optional fields become ``None``."""
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise EventFormatError(f"invalid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise EventFormatError("event must be a JSON object")
        try:
            raw_id = payload.get("id")
            priority = payload.get("priority")
            if priority is not None and not isinstance(priority, str):
                raise EventFormatError("priority must be a string or null")
            targets = payload.get("target_agents")
            if targets is not None and not isinstance(targets, list):
                raise EventFormatError("target_agents must be a list or null")
            return cls(
                id=None if raw_id is None else uuid.UUID(str(raw_id)),
                timestamp=parse_timestamp(str(payload["timestamp"])),
                event_type=str(payload["event_type"]),
                publisher_id=str(payload["publisher_id"]),
                description=str(payload["description"]),
                data=payload["data"],
                emergence_potential=float(payload["emergence_potential"]),
                priority=priority,
                target_agents=None if targets is None else [str(t) for t in targets],
            )
        except KeyError as exc:
            raise EventFormatError(f"missing field: {exc.args[0]}") from exc
        except (TypeError, ValueError) as exc:
            if isinstance(exc, EventFormatError):
                raise
            raise EventFormatError(str(exc)) from exc


class EmergenceSynthesizer:
    """Knowledge-integration agent connected to the shared event log."""

    def __init__(
        self,
        log: EventLog | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.agent_id = AGENT_ID
        self.log = log if log is not None else EventLog(DEFAULT_EVENT_BUS_PATH)
        self.knowledge = KnowledgeSynthesizer()
        self.offset = 0
        self._sleep = sleep

    def _publish(
        self,
        event_type: str,
        description: str,
        data: Any,
        emergence_potential: float,
        priority: str,
        target_agents: list[str] | None = None,
    ) -> SynthesizerEvent:
        event = SynthesizerEvent(
            event_type=event_type,
            publisher_id=self.agent_id,
            description=description,
            data=data,
            emergence_potential=emergence_potential,
            priority=priority,
            target_agents=target_agents,
        )
        self.log.append(event)
        logger.info("Published event: %s by %s", event.event_type, event.publisher_id)
        return event

    def _announce_awakening(self) -> None:
        logger.info('Synthesizer Agent: "I sense knowledge connections waiting to be discovered..."')
        logger.info("Capabilities emerging: [cross_domain_integration, pattern_synthesis, insight_generation]")
        logger.info("Specializations: [knowledge_fusion, concept_combination, emergence_enablement]")

    def connect_to_event_bus(self) -> list[SynthesizerEvent]:
        """Announce awakening on the bus and subscribe to relevant events."""
        logger.info("Connecting synthesizer to event bus...")
        awakening = self._publish(
            "agent_awakened",
            "Synthesizer agent awakened and connecting to event bus",
            {
                "agent_type": "synthesizer",
                "capabilities": [
                    "cross_domain_analysis",
                    "pattern_integration",
                    "insight_generation",
                ],
                "personality": {
                    "curiosity": 0.9,
                    "persistence": 0.8,
                    "collaboration": 0.9,
                    "creativity": 0.9,
                },
            },
            0.95,
            "High",
            ["architect", "coordinator"],
        )
        subscription = self.subscribe_to_events(list(DEFAULT_SUBSCRIPTIONS))
        logger.info("Synthesizer connected to event bus")
        return [awakening, subscription]

    def subscribe_to_events(self, event_types: list[str]) -> SynthesizerEvent:
        """Publish a subscription notice for ``event_types``."""
        logger.info("Subscribing to events: %s", _debug_list(event_types))
        return self._publish(
            "agent_subscribed",
            f"Subscribed to events: {_debug_list(event_types)}",
            {
                "subscribed_events": list(event_types),
                "agent_capabilities": ["cross_domain_analysis", "pattern_integration"],
            },
            0.9,
            "Medium",
        )

    def react_to_event(self, event: SynthesizerEvent) -> SynthesizerEvent | None:
        """Respond to one event; return the event published in reply, if any."""
        kind = event.event_type
        if kind == "agent_awakened":
            if event.publisher_id == self.agent_id:
                return None
            logger.info("Agent awakened: %s, analyzing knowledge integration potential",
                        event.publisher_id)
            return self._analyze_integration_potential(event)
        if kind == "knowledge_synthesis":
            logger.info("Knowledge synthesis event, creating cross-domain insights")
            return self._publish(
                "cross_domain_insights_created",
                "Created cross-domain insights from knowledge synthesis",
                {
                    "insight_types": [
                        "pattern_transfer",
                        "best_practice_transfer",
                        "optimization_transfer",
                    ],
                    "confidence": 0.85,
                    "emergence_contribution": 0.9,
                },
                0.95,
                "High",
            )
        if kind == "cross_domain_insight":
            logger.info("Cross-domain insight detected, enhancing integration patterns")
            return self._publish(
                "integration_patterns_enhanced",
                "Enhanced integration patterns from cross-domain insights",
                {
                    "enhancement_type": "pattern_integration",
                    "improvements": [
                        "knowledge_synthesis_efficiency",
                        "cross_domain_connection_strength",
                        "emergence_potential_amplification",
                    ],
                    "expected_improvement": 0.2,
                },
                0.9,
                "High",
            )
        if kind == "pattern_analysis":
            logger.info("Pattern analysis event, synthesizing knowledge connections")
            return self._publish(
                "knowledge_connections_synthesized",
                "Synthesized knowledge connections from pattern analysis",
                {
                    "synthesis_type": "pattern_based_integration",
                    "connections_created": [
                        "domain_knowledge_bridges",
                        "insight_transfer_paths",
                        "emergence_catalysts",
                    ],
                    "confidence": 0.8,
                },
                0.9,
                "Medium",
            )
        if kind == "integration_request":
            logger.info("Handling integration request from %s", event.publisher_id)
            return self._publish(
                "integration_response",
                "Providing knowledge integration response",
                {
                    "request_from": event.publisher_id,
                    "integration_plan": [
                        "analyze_knowledge_domains",
                        "identify_integration_opportunities",
                        "create_cross_domain_insights",
                    ],
                    "estimated_impact": 0.3,
                },
                0.95,
                "High",
                [event.publisher_id],
            )
        logger.info("Received event: %s from %s", event.event_type, event.publisher_id)
        return None

    def _analyze_integration_potential(self, event: SynthesizerEvent) -> SynthesizerEvent:
        agent_type = "unknown"
        if isinstance(event.data, Mapping) and isinstance(event.data.get("agent_type"), str):
            agent_type = event.data["agent_type"]
        logger.info("Analyzing knowledge integration potential with %s agent", agent_type)
        return self._publish(
            "integration_analysis",
            f"Analyzing knowledge integration potential with {agent_type} agent",
            {
                "target_agent": event.publisher_id,
                "agent_type": agent_type,
                "analysis_type": "knowledge_integration_potential",
                "synthesis_opportunities": ["cross_domain_insights", "pattern_integration"],
            },
            0.9,
            "Medium",
            [event.publisher_id],
        )

    def poll_event_bus(self) -> list[SynthesizerEvent]:
        """React to every event written since the last poll; return the replies published."""
        lines, self.offset = self.log.read_since(self.offset)
        replies = []
        for line in lines:
            try:
                event = SynthesizerEvent.from_json(line)
            except EventFormatError:
                continue
            reply = self.react_to_event(event)
            if reply is not None:
                replies.append(reply)
        return replies

    def run(self, poll_interval: float = 10.0, max_polls: int | None = None) -> None:
        """Connect, synthesize knowledge, then keep reacting to events on the bus."""
        logger.info("Starting synthesizer agent...")
        self._announce_awakening()
        self.connect_to_event_bus()
        self.knowledge.synthesize()
        logger.info("Synthesizer agent analysis complete")
        logger.info("Listening for events from other agents...")
        polls = 0
        while max_polls is None or polls < max_polls:
            self.poll_event_bus()
            polls += 1
            if max_polls is not None and polls >= max_polls:
                break
            self._sleep(poll_interval)


def main(argv: list[str] | None = None) -> int:
    """Run the synthesizer agent against the shared event log."""
    parser = argparse.ArgumentParser(description="Run the knowledge synthesizer agent.")
    parser.add_argument("--log", type=Path, default=DEFAULT_EVENT_BUS_PATH,
                        help="path of the JSON-lines event log")
    parser.add_argument("--interval", type=float, default=10.0,
                        help="seconds between polls of the event log")
    parser.add_argument("--polls", type=int, default=None,
                        help="number of polls before exiting (default: run forever)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    synthesizer = EmergenceSynthesizer(EventLog(args.log))
    try:
        synthesizer.run(poll_interval=args.interval, max_polls=args.polls)
    except KeyboardInterrupt:
        pass
    return 0
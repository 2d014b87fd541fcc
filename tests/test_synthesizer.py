import json
import uuid

import pytest

from emergence.events import EventFormatError, EventLog, EventPriority, SystemEvent
from emergence.synthesizer import EmergenceSynthesizer, SynthesizerEvent, main


@pytest.fixture
def log(tmp_path):
    return EventLog(tmp_path / "events" / "event_bus.jsonl")


@pytest.fixture
def synth(log):
    return EmergenceSynthesizer(log, sleep=lambda _s: None)


def _logged(log):
    lines, _ = log.read_since(0)
    return [SynthesizerEvent.from_json(line) for line in lines]


def _event(event_type, publisher="researcher", data=None):
    return SynthesizerEvent(event_type=event_type, publisher_id=publisher,
                            description="d", data={} if data is None else data)


def test_json_round_trip():
    event = SynthesizerEvent(event_type="x", publisher_id="p", description="d",
                             data={"k": [1, 2]}, emergence_potential=0.5,
                             priority="High", target_agents=["a"])
    back = SynthesizerEvent.from_json(event.to_json())
    assert back == event


def test_round_trip_without_id_or_priority():
    event = SynthesizerEvent(event_type="x", publisher_id="p", description="d", id=None)
    back = SynthesizerEvent.from_json(event.to_json())
    assert back.id is None
    assert back.priority is None
    assert back.timestamp == event.timestamp


def test_missing_optional_fields_become_none():
    line = json.dumps({"timestamp": "2024-01-01T00:00:00Z", "event_type": "x",
                       "publisher_id": "p", "description": "d", "data": {},
                       "emergence_potential": 0.1})
    event = SynthesizerEvent.from_json(line)
    assert (event.id, event.priority, event.target_agents) == (None, None, None)


def test_reads_event_bus_format():
    bus_event = SystemEvent.create("system_startup", "event_bus", "started",
                                   priority=EventPriority.HIGH)
    event = SynthesizerEvent.from_json(bus_event.to_json())
    assert event.priority == "High"
    assert event.id == bus_event.id
    assert event.event_type == "system_startup"


@pytest.mark.parametrize("line", ["not json", "[]", '{"event_type": "x"}'])
def test_invalid_lines_raise(line):
    with pytest.raises(EventFormatError):
        SynthesizerEvent.from_json(line)


def test_connect_publishes_awakening_and_subscription(synth, log):
    synth.connect_to_event_bus()
    events = _logged(log)
    assert [e.event_type for e in events] == ["agent_awakened", "agent_subscribed"]
    assert all(e.publisher_id == "emergence-synthesizer" for e in events)
    assert events[0].target_agents == ["architect", "coordinator"]
    assert events[0].priority == "High"
    assert events[1].data["subscribed_events"] == [
        "agent_awakened", "knowledge_synthesis", "cross_domain_insight",
        "pattern_analysis", "integration_request",
    ]


def test_subscription_description_lists_types(synth):
    event = synth.subscribe_to_events(["a", "b"])
    assert event.description == 'Subscribed to events: ["a", "b"]'
    assert event.priority == "Medium"


def test_react_to_other_agent_awakening(synth, log):
    reply = synth.react_to_event(_event("agent_awakened", data={"agent_type": "architect"}))
    assert reply.event_type == "integration_analysis"
    assert reply.target_agents == ["researcher"]
    assert reply.data["agent_type"] == "architect"
    assert _logged(log)[0].id == reply.id


def test_awakening_without_agent_type_is_unknown(synth):
    reply = synth.react_to_event(_event("agent_awakened", data="oops"))
    assert reply.data["agent_type"] == "unknown"


def test_ignores_own_awakening(synth, log):
    assert synth.react_to_event(_event("agent_awakened", publisher="emergence-synthesizer")) is None
    assert _logged(log) == []


@pytest.mark.parametrize("incoming, outgoing", [
    ("knowledge_synthesis", "cross_domain_insights_created"),
    ("cross_domain_insight", "integration_patterns_enhanced"),
    ("pattern_analysis", "knowledge_connections_synthesized"),
    ("integration_request", "integration_response"),
])
def test_reaction_mapping(synth, incoming, outgoing):
    assert synth.react_to_event(_event(incoming)).event_type == outgoing


def test_integration_request_targets_requester(synth):
    reply = synth.react_to_event(_event("integration_request", publisher="architect"))
    assert reply.target_agents == ["architect"]
    assert reply.data["request_from"] == "architect"


def test_unknown_event_has_no_reply(synth, log):
    assert synth.react_to_event(_event("something_else")) is None
    assert _logged(log) == []


def test_poll_reacts_once_per_event(synth, log):
    log.append(_event("pattern_analysis"))
    log.append(_event("integration_request"))
    first = synth.poll_event_bus()
    assert [r.event_type for r in first] == [
        "knowledge_connections_synthesized", "integration_response",
    ]
    second = synth.poll_event_bus()
    assert second == []
    assert len(_logged(log)) == 4
    assert synth.offset == log.path.stat().st_size


def test_poll_skips_malformed_lines(synth, log):
    log.append({"garbage": True})
    log.append(_event("knowledge_synthesis"))
    replies = synth.poll_event_bus()
    assert [r.event_type for r in replies] == ["cross_domain_insights_created"]


def test_run_connects_synthesizes_and_polls(log):
    sleeps = []
    synth = EmergenceSynthesizer(log, sleep=sleeps.append)
    log.append(_event("agent_awakened", publisher="architect", data={"agent_type": "architect"}))
    synth.run(poll_interval=0.5, max_polls=2)
    kinds = [e.event_type for e in _logged(log)]
    assert kinds.count("integration_analysis") == 1
    assert "agent_subscribed" in kinds
    assert len(synth.knowledge.knowledge_synthesis) == 2
    assert sleeps == [0.5]


def test_main_runs_bounded(tmp_path):
    path = tmp_path / "bus.jsonl"
    assert main(["--log", str(path), "--polls", "1", "--interval", "0"]) == 0
    events = _logged(EventLog(path))
    assert events[0].event_type == "agent_awakened"
    assert isinstance(events[0].id, uuid.UUID)
from datetime import timedelta

import pytest

from emergence.event_bus import (
    CoordinatorAgent,
    EmergenceEventBus,
    OrchestrationRule,
    main,
)
from emergence.events import EventLog, EventPriority, SystemEvent


@pytest.fixture
def bus(tmp_path):
    return EmergenceEventBus(EventLog(tmp_path / "events" / "event_bus.jsonl"))


def _event(event_type, publisher="agent", potential=0.5):
    return SystemEvent.create(
        event_type=event_type,
        publisher_id=publisher,
        description="test",
        emergence_potential=potential,
        priority=EventPriority.LOW,
    )


def test_publish_records_history_and_log(bus):
    event = _event("system_startup")
    bus.publish_event(event)
    assert bus.event_history == [event]
    lines, _ = bus.log.read_since(0)
    assert [SystemEvent.from_json(line) for line in lines] == [event]


def test_single_awakening_is_not_a_pattern(bus):
    assert bus.publish_event(_event("agent_awakened", "a")) == []
    assert bus.emergence_patterns == []


def test_second_awakening_detects_collaboration(bus):
    bus.publish_event(_event("agent_awakened", "a"))
    detected = bus.publish_event(_event("agent_awakened", "b"))
    assert len(detected) == 1
    pattern = detected[0]
    assert pattern.pattern_type == "collaboration_emergence"
    assert pattern.involved_agents == ["a", "b"]
    assert pattern.suggested_actions == ["orchestrate_collaboration", "optimize_agent_combinations"]
    assert pattern.description == 'Multiple agents awakened: ["a", "b"]'


def test_collaboration_pattern_takes_first_three_awakenings(bus):
    for name in ["a", "b", "c", "d"]:
        bus.publish_event(_event("agent_awakened", name))
    last = bus.emergence_patterns[-1]
    assert last.involved_agents == ["a", "b", "c"]
    assert len(bus.emergence_patterns) == 3


def test_learning_pattern_needs_three_events(bus):
    assert bus.publish_event(_event("pattern_analysis", "r")) == []
    assert bus.publish_event(_event("domain_finding", "d")) == []
    detected = bus.publish_event(_event("analysis_done", "s"))
    assert [p.pattern_type for p in detected] == ["learning_acceleration"]
    assert detected[0].involved_agents == ["r", "d", "s"]


def test_stats_average(bus):
    assert bus.get_stats().average_emergence_potential == 0.0
    bus.register_agent("researcher", ["agent_awakened"])
    bus.publish_event(_event("x", potential=0.25))
    bus.publish_event(_event("y", potential=0.75))
    stats = bus.get_stats()
    assert stats.active_agents == 1
    assert stats.total_events == 2
    assert stats.emergence_patterns == 0
    assert stats.average_emergence_potential == pytest.approx(0.5)


def test_register_and_subscribe_build_subscriptions(bus):
    bus.register_agent("researcher", ["agent_awakened", "git_commit"])
    bus.subscribe_to_events("debugger", ["agent_awakened"])
    subscribers = [s.agent_id for s in bus.event_subscribers["agent_awakened"]]
    assert subscribers == ["researcher", "debugger"]
    assert bus.event_subscribers["git_commit"][0].event_types == ["git_commit"]
    assert "debugger" not in bus.active_agents


def test_awaken_coordinator_installs_rules(bus):
    coordinator = bus.awaken_coordinator()
    assert bus.coordinator is coordinator
    assert [r.agent_combination for r in coordinator.orchestration_rules] == [
        ["researcher", "debugger"],
        ["synthesizer", "domain_analyzer"],
    ]


def test_coordinator_reacts_through_bus(bus):
    bus.awaken_coordinator()
    bus.publish_event(_event("agent_awakened", "a"))
    history = bus.coordinator.collaboration_history
    assert len(history) == 1
    assert history[0].agent_ids == ["researcher", "debugger"]
    assert history[0].duration == timedelta(seconds=60)
    assert history[0].outcomes == ["initiate_collaboration", "optimize_patterns"]


def test_coordinator_orchestration_events():
    rule = OrchestrationRule(
        trigger_conditions=["learning_pattern_detected"],
        agent_combination=["synthesizer", "domain_analyzer"],
        expected_emergence=0.9,
        action_sequence=["synthesize_knowledge"],
    )
    coordinator = CoordinatorAgent(orchestration_rules=[rule])
    produced = coordinator.react_to_event(_event("cross_domain_finding"))
    assert len(produced) == 1
    out = produced[0]
    assert out.event_type == "orchestration_triggered"
    assert out.publisher_id == "coordinator"
    assert out.priority is EventPriority.HIGH
    assert out.target_agents == ["synthesizer", "domain_analyzer"]
    assert out.data == {"rule": ["synthesize_knowledge"], "expected_emergence": 0.9}


def test_should_trigger_rule_conditions():
    coordinator = CoordinatorAgent()
    awake = OrchestrationRule(["multiple_agents_awakened"], [], 0.5, [])
    learn = OrchestrationRule(["learning_pattern_detected"], [], 0.5, [])
    other = OrchestrationRule(["unknown_condition"], [], 0.5, [])
    assert coordinator.should_trigger_rule(awake, _event("agent_awakened"))
    assert not coordinator.should_trigger_rule(awake, _event("agent_subscribed"))
    assert coordinator.should_trigger_rule(learn, _event("domain_analysis_complete"))
    assert not coordinator.should_trigger_rule(learn, _event("agent_awakened"))
    assert not coordinator.should_trigger_rule(other, _event("agent_awakened"))


def test_unrelated_event_triggers_nothing():
    coordinator = CoordinatorAgent(
        orchestration_rules=[OrchestrationRule(["multiple_agents_awakened"], ["a"], 0.5, ["x"])]
    )
    assert coordinator.react_to_event(_event("system_startup")) == []
    assert coordinator.collaboration_history == []


def test_main_publishes_startup_event(tmp_path):
    log_path = tmp_path / "bus.jsonl"
    assert main(["--log", str(log_path), "--cycles", "0"]) == 0
    lines, _ = EventLog(log_path).read_since(0)
    assert len(lines) == 1
    event = SystemEvent.from_json(lines[0])
    assert event.event_type == "system_startup"
    assert event.publisher_id == "event_bus"
    assert event.priority is EventPriority.HIGH
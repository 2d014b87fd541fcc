# emergence

A small substrate for collaborating agents. Agents publish events to a shared
JSON Lines event log, react to one another's events, and the event bus looks
for emergence patterns in the stream.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

All commands that use the event log default to
`.emergence/events/event_bus.jsonl` in the current directory; the directory is
created when the first event is written.

### `emergence-event-bus`

Starts the event bus. It awakens a coordinator agent with its orchestration
rules, publishes a `system_startup` event, logs statistics (active agents,
total events, emergence patterns, average emergence potential) and then logs
its status periodically until interrupted.

Options:

- `--log PATH` — path of the JSON Lines event log.
- `--interval SECONDS` — seconds between status reports (default 10).
- `--cycles N` — number of status reports before exiting (default: run forever).

### `emergence-terminal`

An interactive terminal, reading commands from standard input:

```
awaken researcher
awaken explorer
awaken researcher with curiosity=0.9 persistence=0.8
status
energy
physics
researcher, what patterns do you see?
help
exit
```

Agents are awakened with personality traits (curiosity, persistence,
collaboration, creativity), answer in line with their personality, and are
sent to dormancy on `exit`, `quit` or end of input.

Options:

- `--no-delay` — skip the pauses that pace agent responses.

### `emergence-synthesizer`

Runs the knowledge synthesizer agent. It announces itself on the event log,
publishes a subscription notice, performs a cross-domain knowledge synthesis,
and then polls the event log, replying to `agent_awakened`,
`knowledge_synthesis`, `cross_domain_insight`, `pattern_analysis` and
`integration_request` events with events of its own.

Options:

- `--log PATH` — path of the JSON Lines event log.
- `--interval SECONDS` — seconds between polls (default 10).
- `--polls N` — number of polls before exiting (default: run forever).

## Library use

```python
from emergence.events import EventLog, EventPriority, SystemEvent
from emergence.event_bus import EmergenceEventBus

bus = EmergenceEventBus(EventLog("events.jsonl"))
bus.awaken_coordinator()
bus.register_agent("researcher", ["agent_awakened"])
patterns = bus.publish_event(
    SystemEvent.create(
        "agent_awakened",
        "researcher",
        "Researcher awakened",
        {"agent_type": "researcher"},
        0.9,
        EventPriority.HIGH,
        None,
    )
)
print(bus.get_stats())
```

`publish_event` records the event, appends it to the log and returns the
emergence patterns it newly detected.

Modules:

- `emergence.events` — `SystemEvent`, `EventPriority` and `EventLog`, the
  append-only JSON Lines event log (`append`, and `read_since`, which returns
  the complete lines written after a byte offset and the new offset).
- `emergence.event_bus` — `EmergenceEventBus`, `CoordinatorAgent`,
  `OrchestrationRule`, `EmergencePattern`, `CollaborationSession` and
  `EventBusStats`.
- `emergence.terminal` — `EmergenceTerminal`, `LivingAgent`,
  `AgentPersonality`, `AgentState` and helpers such as `extract_trait`,
  `generate_agent_response` and `create_energy_bar`.
- `emergence.knowledge` — `KnowledgeSynthesizer`, `load_domain_knowledge`,
  `find_complementary_patterns` and the records `KnowledgeSynthesis`,
  `CrossDomainInsight`, `IntegrationPattern` and `DomainKnowledge`.
- `emergence.synthesizer` — `EmergenceSynthesizer` and `SynthesizerEvent`.

## What the package does not do

- There is no command that analyses documentation or configuration files in a
  project; the agents here only exchange and react to events.
- The event bus keeps its registry and history in memory for one process.
  Other agents share events with it only through the JSON Lines log file; it
  is not a network server.
- Orchestration events produced by the coordinator are returned by
  `CoordinatorAgent.react_to_event` but are not published back to the log.
- The knowledge synthesizer works from a fixed, built-in set of domain
  knowledge; it does not learn from or store knowledge between runs.
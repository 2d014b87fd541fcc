"""Living agent substrate: event log and bus, agent terminal and knowledge synthesizer."""

__version__ = "0.1.0"
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emergence"
version = "0.1.0"
description = "Living agent substrate: an event bus, an interactive agent terminal and a knowledge synthesizer agent"
requires-python = ">=3.10"
dependencies = []
keywords = ["agents", "event-bus", "emergence", "collaboration", "knowledge-synthesis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
emergence-event-bus = "emergence.event_bus:main"
emergence-terminal = "emergence.terminal:main"
emergence-synthesizer = "emergence.synthesizer:main"

[tool.hatch.build.targets.wheel]
packages = ["emergence"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

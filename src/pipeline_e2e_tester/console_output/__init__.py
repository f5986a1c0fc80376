"""Console output exports."""

from .scenario_console import ScenarioConsole, Verbosity

__all__ = ["ScenarioConsole", "Verbosity"]

from .core import Scenario
from .projection_scenario import ProjectionScenario

__all__ = [
    "Scenario",
    "ProjectionScenario",
]

"""Balancing tools for the wheel and the shop."""

from .checklist import ChecklistIssue, run_checklist
from .wheel_simulator import SimulationResult, WheelSimulator, expected_shards

__all__ = ["ChecklistIssue", "SimulationResult", "WheelSimulator", "expected_shards", "run_checklist"]

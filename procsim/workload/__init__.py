"""Scenario and arrival generation for command-line runs."""

from .arrival_process import ArrivalProcess
from .scenario import Scenario

__all__ = ["ArrivalProcess", "Scenario"]

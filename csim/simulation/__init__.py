"""Simulation package.

Exposes the Simulation class and the command-line entry point at
`csim.simulation`.
"""
from .command_line import SimulationConfig, main
from .simulation import Simulation

__all__ = ["Simulation", "SimulationConfig", "main"]

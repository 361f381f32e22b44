"""Simulated cluster nodes for local runs and tests."""

from .node import GENESIS_ID, SimNode, create_sim_node_app

__all__ = ["GENESIS_ID", "SimNode", "create_sim_node_app"]

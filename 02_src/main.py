"""Main entry point for the cluster tail."""

import asyncio
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from cluster_tail import TailConfig, parse_nodes, spawn_tail
from cluster_tail.logging_config import get_logger, node_context, setup_logging
from sim import SimNode, create_sim_node_app

logger = get_logger(__name__)


async def tail_cluster(config: TailConfig) -> None:
    """Log every event the cluster emits until cancelled."""
    nodes = parse_nodes(os.getenv("TAIL_NODES"), default_port=config.debug_port)
    tail = await spawn_tail(nodes, config)
    reported = 0
    try:
        while True:
            try:
                event = await tail.next_event(timeout=1.0)
            except asyncio.TimeoutError:
                pass
            else:
                logger.info(
                    "%s: %s",
                    event.validator,
                    event.event,
                    extra=node_context(event.validator),
                )

            for failure in tail.failures[reported:]:
                logger.error("Node %s stopped: %s", failure.validator, failure.error)
            reported = len(tail.failures)
    finally:
        await tail.stop()


def run_sim_node() -> None:
    """Serve one simulated node's debug interface."""
    host = os.getenv("SIM_HOST", "localhost")
    port = int(os.getenv("SIM_PORT", "6191"))
    interval = float(os.getenv("SIM_COMMIT_INTERVAL", "0.5"))
    app = create_sim_node_app(SimNode(os.getenv("SIM_IDENTITY", "sim-1")), interval)
    uvicorn.run(app, host=host, port=port, log_level="info")


def main():
    """Run the tail, or a simulated node with ``main.py sim``."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    if len(sys.argv) > 1 and sys.argv[1] == "sim":
        run_sim_node()
        return

    try:
        asyncio.run(tail_cluster(TailConfig.from_env()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

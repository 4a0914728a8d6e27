from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Sequence

from flightlink.client.config import CLIENT_CONFIG, load_config
from flightlink.client.delegate import ClientDelegate
from flightlink.client.network import ConnectionState, StateClient
from flightlink.protocol.errors import ProtocolError
from flightlink.protocol.messages import StateEntry

logger = logging.getLogger(__name__)


class LoggingDelegate(ClientDelegate):
    """Logs the manifest and every value; used by the command line runner."""

    def did_connect(self, client: StateClient) -> None:
        logger.info("Connected to %s:%s, waiting for manifest", client.host, client.port)

    def did_receive_error(self, client: StateClient, error: ProtocolError) -> None:
        logger.error("Client error: %s", error.to_payload())

    def did_receive_manifest(self, client: StateClient, states: Sequence[StateEntry]) -> None:
        logger.info("Manifest: %s states", len(states))
        for entry in states:
            logger.info("  %s", entry)

    def did_receive_bool(self, client: StateClient, value: bool, state_id: int) -> None:
        self._log(client, state_id, value)

    def did_receive_int64(self, client: StateClient, value: int, state_id: int) -> None:
        self._log(client, state_id, value)

    def did_receive_float64(self, client: StateClient, value: float, state_id: int) -> None:
        self._log(client, state_id, value)

    def did_receive_string(self, client: StateClient, value: str, state_id: int) -> None:
        self._log(client, state_id, value)

    @staticmethod
    def _log(client: StateClient, state_id: int, value: object) -> None:
        entry = client.find_state(state_id)
        logger.info("%s = %r", entry.name if entry else state_id, value)


async def run_client(host: Optional[str] = None) -> None:
    load_config()
    logging.basicConfig(level=CLIENT_CONFIG["log_level"])
    delegate = LoggingDelegate()
    client = StateClient(delegate)

    await client.connect(host or CLIENT_CONFIG["server_host"])
    try:
        while client.state is ConnectionState.READY:
            await asyncio.sleep(0.5)
    finally:
        await client.close()


def main() -> None:
    asyncio.run(run_client(sys.argv[1] if len(sys.argv) > 1 else None))


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from flightlink.protocol.messages import StateEntry

if TYPE_CHECKING:
    from flightlink.client.network import StateClient

logger = logging.getLogger(__name__)


class ClientDelegate:
    """
    Receives events from a :class:`StateClient`.

    Every method has a default, so subclasses override only what they need.
    Int32 values fall through to :meth:`did_receive_int64` and Float32 values
    to :meth:`did_receive_float64` unless the narrower method is overridden.

    The client keeps only a weak reference to its delegate: keep the delegate
    alive for as long as events should be delivered.
    """

    def did_connect(self, client: "StateClient") -> None:
        """Connection is ready. The client requests the manifest right after."""

    def did_receive_error(self, client: "StateClient", error: Exception) -> None:
        logger.error("Client error: %s", error)

    def did_receive_manifest(self, client: "StateClient", states: Sequence[StateEntry]) -> None:
        """A new manifest replaced the previous one; ``states`` is sorted by id."""

    def did_receive_bool(self, client: "StateClient", value: bool, state_id: int) -> None:
        pass

    def did_receive_int32(self, client: "StateClient", value: int, state_id: int) -> None:
        self.did_receive_int64(client, value, state_id)

    def did_receive_int64(self, client: "StateClient", value: int, state_id: int) -> None:
        pass

    def did_receive_float32(self, client: "StateClient", value: float, state_id: int) -> None:
        self.did_receive_float64(client, value, state_id)

    def did_receive_float64(self, client: "StateClient", value: float, state_id: int) -> None:
        pass

    def did_receive_string(self, client: "StateClient", value: str, state_id: int) -> None:
        pass


__all__ = ["ClientDelegate"]

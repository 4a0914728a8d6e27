from .config import CLIENT_CONFIG, ConfigError, load_config
from .delegate import ClientDelegate
from .network import ConnectionState, StateClient
from .session import SessionInfo, parse_session

__all__ = [
    "CLIENT_CONFIG",
    "ConfigError",
    "load_config",
    "ClientDelegate",
    "ConnectionState",
    "StateClient",
    "SessionInfo",
    "parse_session",
]

"""Protocol-wide constants for the state channel."""

DEFAULT_PORT = 10112
ENCODING = "utf-8"
MANIFEST_ID = -1
HEADER_SIZE = 8  # id:int32 + size:int32
WRITE_FLAG = 1
READ_FLAG = 0
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

__all__ = [
    "DEFAULT_PORT",
    "ENCODING",
    "MANIFEST_ID",
    "HEADER_SIZE",
    "WRITE_FLAG",
    "READ_FLAG",
    "INT32_MIN",
    "INT32_MAX",
    "INT64_MIN",
    "INT64_MAX",
]

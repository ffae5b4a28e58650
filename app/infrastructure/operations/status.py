"""Operation status enumeration.

Outcome of a single Graph call. The exports only branch on SUCCESS and
NOT_FOUND; every other status ends the run.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Call returned a usable body
        TRANSIENT_ERROR: Network, timeout, throttling or Graph-side failure
        PERMANENT_ERROR: Request rejected (forbidden, bad filter, malformed reply)
        UNAUTHORIZED: Token missing, expired or rejected
        NOT_FOUND: The requested object does not exist in the directory
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

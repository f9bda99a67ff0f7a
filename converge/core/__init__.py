from converge.core.exceptions import (
    ConfigurationError,
    ConvergeError,
    NotFoundError,
    ResourceFailedError,
    TimeoutError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "ConvergeError",
    "NotFoundError",
    "ResourceFailedError",
    "TimeoutError",
    "TransportError",
]

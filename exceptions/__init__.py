"""
Exceptions Package for Host Watch Bot

Provides the exception hierarchy for error handling
throughout the application.
"""

from exceptions.base import (
    HostWatchException,
    ConfigurationError,
    InitializationError,
)

from exceptions.monitoring import (
    ProbeError,
    HostResolutionError,
    ProbeUnavailableError
)

from exceptions.delivery import (
    DeliveryError
)

__all__ = [
    # Base exceptions
    "HostWatchException",
    "ConfigurationError",
    "InitializationError",

    # Monitoring exceptions
    "ProbeError",
    "HostResolutionError",
    "ProbeUnavailableError",

    # Delivery exceptions
    "DeliveryError"
]

"""
Pricing module exceptions.
"""

from shared.exceptions import ExternalServiceError


class UpstreamUnavailableError(ExternalServiceError):
    """
    Raised when the live quote service cannot supply a usable price.

    Covers missing configuration, network failures, timeouts, non-2xx
    responses, malformed payloads and an explicit `success: false`.
    The price resolver always recovers from it.
    """

    def __init__(self, reason: str):
        super().__init__(
            f"Copper price feed unavailable: {reason}",
            service="metals-api",
            code="UPSTREAM_UNAVAILABLE",
            details={"reason": reason},
        )
        self.reason = reason

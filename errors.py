# Filename: errors.py
"""
Error taxonomy for the launch alert pipeline.

RECOVERABLE vs UNRECOVERABLE:
- Recoverable: the pipeline degrades and keeps going (absent market data,
  non-reputable creator).
- Unrecoverable: the single event is dropped and logged.

No error is fatal to the process.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for failures isolated to one event's pipeline."""

    recoverable = False

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class MalformedPayload(PipelineError):
    """Creation payload could not be decoded. Event is dropped."""


class DerivationFailed(PipelineError):
    """No off-curve derived address in the bounded nonce search. Event is dropped."""


class EnrichmentUnavailable(PipelineError):
    """Market data lookup failed. Degrades to an empty snapshot."""

    recoverable = True


class ReputationLookupFailed(PipelineError):
    """Creator balance lookup failed. Scored as non-reputable."""

    recoverable = True


class NotificationDeliveryFailed(PipelineError):
    """Alert could not be delivered. Logged, not retried."""

"""Logging setup and structured logging for pipeline steps."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class StructuredStepLogger:
    """Structured logger for RFQ pipeline steps."""

    def __init__(self, trace_id: str) -> None:
        self.trace_id = trace_id

    def log_step(
        self,
        step: str,
        outcome: str,
        latency_ms: float,
        document_id: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log pipeline step completion with structured data."""
        log_data: dict[str, Any] = {
            "trace_id": self.trace_id,
            "step": step,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if document_id:
            log_data["document_id"] = document_id
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Pipeline step: {step} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

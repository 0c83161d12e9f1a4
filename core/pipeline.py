"""Shared consumer/processor/producer scaffolding."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from .cli_errors import CLIError, ExitCode

LOG = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")
T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"

    def unwrap(self) -> ResultT:
        """Return payload or raise ValueError. Use after ok() check."""
        if self.payload is None:
            msg = (self.diagnostics or {}).get("message", "No payload")
            raise ValueError(msg)
        return self.payload


class RequestConsumer(Generic[RequestT]):
    """Consumer that hands back the request it was built with.

    Example usage:
        consumer = RequestConsumer(YearPlanRequest(...))
        payload = consumer.consume()
    """

    def __init__(self, request: RequestT) -> None:
        self._request = request

    def consume(self) -> RequestT:  # pragma: no cover - trivial
        return self._request


class BaseProducer:
    """Base class for pipeline producers with common error handling.

    Subclasses override _produce_success(); failed envelopes print their
    diagnostic message and stop there.
    """

    def produce(self, result: ResultEnvelope) -> None:
        if not result.ok():
            msg = (result.diagnostics or {}).get("message")
            if msg:
                print(msg)
            hint = (result.diagnostics or {}).get("hint")
            if hint:
                print(f"Hint: {hint}")
            return
        if result.payload is not None:
            self._produce_success(result.payload, result.diagnostics)

    def _produce_success(self, payload: Any, diagnostics: Optional[Dict[str, Any]]) -> None:
        """Override in subclass to handle successful result output."""
        raise NotImplementedError("Subclass must implement _produce_success")


class SafeProcessor(Generic[T, R]):
    """Base processor that turns exceptions into error envelopes.

    CLIError subclasses keep their exit code and hint in the diagnostics;
    anything else is reported with the generic error code.
    """

    def process(self, payload: T) -> ResultEnvelope[R]:
        try:
            result = self._process_safe(payload)
            return ResultEnvelope(status="success", payload=result)
        except CLIError as e:
            LOG.debug("%s failed: %s", type(self).__name__, e)
            return ResultEnvelope(
                status="error",
                diagnostics={"message": e.message, "code": int(e.code), "hint": e.hint},
            )
        except Exception as e:
            LOG.debug("%s failed", type(self).__name__, exc_info=True)
            return ResultEnvelope(
                status="error",
                diagnostics={"message": str(e), "code": int(ExitCode.ERROR)},
            )

    def _process_safe(self, payload: T) -> R:
        """Override to implement processing logic without error handling boilerplate."""
        raise NotImplementedError("Subclass must implement _process_safe")


def run_pipeline(request: Any, processor: SafeProcessor, producer: BaseProducer) -> int:
    """Process a request, produce its output and return the CLI exit code.

    Returns 0 on success, or the code carried in the diagnostics (default 2).
    """
    envelope = processor.process(RequestConsumer(request).consume())
    producer.produce(envelope)
    return 0 if envelope.ok() else int((envelope.diagnostics or {}).get("code", 2))

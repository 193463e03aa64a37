"""Delivery of user intents from the canvas to the state container."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blockcanvas.intents.processor import IntentProcessor

if TYPE_CHECKING:
    from blockcanvas.intents.types import Intent

logger = logging.getLogger(__name__)


class IntentDispatcher:
    """Hands each gesture's intent to the registered processors, in order.

    A gesture has already finished on screen when its intent is emitted, so
    a processor that raises is logged and skipped rather than unwinding the
    canvas. Tests pass ``strict=True`` to see the exception instead.
    """

    def __init__(
        self,
        processors: list[IntentProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[IntentProcessor] = list(processors) if processors else []
        self._strict = strict

    @property
    def active(self) -> bool:
        """True if some processor will receive intents."""
        return bool(self._processors)

    def add(self, processor: IntentProcessor) -> None:
        self._processors.append(processor)

    def remove(self, processor: IntentProcessor) -> None:
        """Stop delivering to *processor*; unknown processors are ignored."""
        if processor in self._processors:
            self._processors.remove(processor)

    def emit(self, intent: Intent) -> None:
        """Deliver *intent* to a snapshot of the processor list.

        Processors added or removed while delivering take effect on the
        next intent.
        """
        for processor in list(self._processors):
            try:
                processor.on_intent(intent)
            except Exception:
                if self._strict:
                    raise
                logger.warning(
                    "Dropped %s for processor %s",
                    type(intent).__name__,
                    processor,
                    exc_info=True,
                )

    def shutdown(self) -> None:
        """Release every processor when the canvas closes.

        In strict mode all processors still get their shutdown call and the
        first failure is re-raised afterwards.
        """
        first_error: Exception | None = None
        for processor in self._processors:
            try:
                processor.shutdown()
            except Exception as e:
                if not self._strict:
                    logger.warning("Processor %s failed to shut down", processor, exc_info=True)
                elif first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

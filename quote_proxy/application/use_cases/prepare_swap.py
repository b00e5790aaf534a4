from __future__ import annotations

from typing import Callable

from quote_proxy.domain.entities.quote import ExecutionPayload, Quote
from quote_proxy.domain.services.execution import prepare_execution
from quote_proxy.shared.clock import epoch_ms


class PrepareSwapUseCase:
    def __init__(self, *, clock: Callable[[], int] = epoch_ms):
        self._clock = clock

    def execute(self, quote: Quote) -> ExecutionPayload:
        return prepare_execution(quote, now_ms=self._clock())

"""Fixed-interval polling loop over ``AnalysisService.poll``.

Client-side state machine::

    Idle -> Polling(no signature) -> Unchanged | Changed(result)
         -> Polling(last signature) -> ...

A failed poll is reported and forgets the last signature, so the next
successful poll always delivers a full result. Retrying is simply the next
tick; nothing is retried within a tick.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from ..logging_config import get_logger
from ..models import AnalysisRequest, AnalysisResult, PollResponse
from .service import AnalysisService

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 1.0

ChangeCallback = Callable[[AnalysisResult, str], Any]
ErrorCallback = Callable[[Exception], Any]


@dataclass
class PollerState:
    signature: Optional[str] = None
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    polls: int = 0
    changes: int = 0


class AnalysisPoller:
    """Drive repeated polls for one request and report changes."""

    def __init__(
        self,
        service: AnalysisService,
        request: Union[AnalysisRequest, Mapping[str, Any]],
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        on_change: Optional[ChangeCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.service = service
        self.request = request
        self.interval_seconds = interval_seconds
        self.on_change = on_change
        self.on_error = on_error
        self.state = PollerState()

    async def poll_once(self) -> Optional[PollResponse]:
        """One tick. Returns the response, or None when the poll failed."""
        self.state.polls += 1
        try:
            response = await self.service.poll(self.request, self.state.signature)
        except Exception as e:
            logger.debug("Poll failed: %s", e)
            self.state.signature = None
            self.state.result = None
            self.state.error = str(e)
            if self.on_error is not None:
                self.on_error(e)
            return None

        self.state.signature = response.signature
        self.state.error = None
        if response.changed and response.result is not None:
            self.state.result = response.result
            self.state.changes += 1
            if self.on_change is not None:
                self.on_change(response.result, response.signature)
        return response

    async def run(
        self,
        stop_event: Optional[asyncio.Event] = None,
        max_polls: Optional[int] = None,
    ) -> PollerState:
        """Poll until ``stop_event`` is set or ``max_polls`` ticks have run."""
        stop_event = stop_event or asyncio.Event()
        ticks = 0

        while not stop_event.is_set():
            await self.poll_once()
            ticks += 1
            if max_polls is not None and ticks >= max_polls:
                break
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

        return self.state

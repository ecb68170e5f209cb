import asyncio
import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Hashable, Optional, TypeVar

from app.platform.exceptions import RequestCancelledError
from app.platform.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RequestState(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class TrackedRequest:
    key: Hashable
    generation: int
    task: Optional[asyncio.Task] = None
    state: RequestState = RequestState.PENDING
    error: Optional[BaseException] = field(default=None, repr=False)
    waiters: int = 0

    @property
    def done(self) -> bool:
        return self.state is not RequestState.PENDING


class RequestTracker:
    """
    One in-flight request per key.

    A caller asking for a key that is already in flight joins the running
    request and shares its result. A re-run (`supersede=True`) cancels the
    running request instead; everyone waiting on it gets
    RequestCancelledError, and a result that finishes after being
    superseded is dropped.
    """

    def __init__(self):
        self._active: dict[Hashable, TrackedRequest] = {}
        self._generations = itertools.count(1)

    def active(self, key: Hashable) -> Optional[TrackedRequest]:
        return self._active.get(key)

    def is_current(self, request: TrackedRequest) -> bool:
        return self._active.get(request.key) is request

    async def run(self, key: Hashable, work: Callable[[], Awaitable[T]], supersede: bool = False) -> T:
        """Run `work()` as the request for `key`, or join the one in flight."""
        previous = self._active.get(key)
        if previous is not None and not previous.done:
            if not supersede:
                logger.info(f"Joining in-flight request {key} (generation {previous.generation})")
                return await self._wait(previous)
            logger.info(f"Cancelling superseded request {key} (generation {previous.generation})")
            previous.task.cancel()

        request = TrackedRequest(key=key, generation=next(self._generations))
        request.task = asyncio.ensure_future(self._drive(request, work))
        self._active[key] = request
        return await self._wait(request)

    async def _drive(self, request: TrackedRequest, work: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await work()
        except asyncio.CancelledError:
            request.state = RequestState.CANCELLED
            raise
        except Exception as e:
            request.state = RequestState.FAILED
            request.error = e
            raise
        else:
            if not self.is_current(request):
                request.state = RequestState.CANCELLED
                raise RequestCancelledError()
            request.state = RequestState.SUCCEEDED
            return result
        finally:
            if self.is_current(request):
                del self._active[request.key]

    async def _wait(self, request: TrackedRequest) -> T:
        request.waiters += 1
        try:
            return await asyncio.shield(request.task)
        except asyncio.CancelledError:
            if request.task.cancelled():
                raise RequestCancelledError()
            # the caller itself was cancelled; stop the work if nobody else wants it
            if request.waiters == 1:
                request.task.cancel()
                request.state = RequestState.CANCELLED
                if self.is_current(request):
                    del self._active[request.key]
            raise
        finally:
            request.waiters -= 1

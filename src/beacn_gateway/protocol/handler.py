"""Device actor for Beacn Mic communication.

A single actor owns the USB connection. Callers never touch the
connection; they submit ``(request, future)`` pairs on a FIFO queue and
await the future. The actor services one request at a time, running
every blocking USB call on one dedicated worker thread.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

from ..core.errors import (
    ActorStoppedError,
    ConfirmationMismatchError,
    GatewayError,
)
from .constants import REPLY_LEN, SHUTDOWN_SENTINEL, VALUE_LEN
from .frames import Frame, validate_fetch_reply

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 30


class Connection(Protocol):
    """Blocking transport the actor drives (see ``UsbConnection``)."""

    def open(self) -> None: ...

    def write(self, data: bytes) -> None: ...

    def read(self, size: int) -> bytes: ...

    def close(self) -> None: ...


class Addressable(Protocol):
    """Anything carrying a parameter address, e.g. ``ParameterSpec``."""

    group: int
    child_id: int


# ============================================================================
# Requests
# ============================================================================


@dataclass(frozen=True, eq=False)
class Fetch:
    """Read the current wire value of a parameter."""

    parameter: Addressable


@dataclass(frozen=True, eq=False)
class Set:
    """Write a wire value, then read it back to confirm."""

    parameter: Addressable
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != VALUE_LEN:
            raise ValueError(f"Wire value must be {VALUE_LEN} bytes, got {len(self.value)}")


@dataclass(frozen=True, eq=False)
class Shutdown:
    """Stop the actor after every request queued before it is serviced."""


Request = Union[Fetch, Set, Shutdown]


class ActorState(str, Enum):
    """Lifecycle of the device actor."""

    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    FAILED = "failed"


def _describe(request: Request) -> str:
    if isinstance(request, Shutdown):
        return "Shutdown"
    param = request.parameter
    name = getattr(param, "name", f"0x{param.group:02X}/{param.child_id}")
    if isinstance(request, Set):
        return f"Set({name}, {request.value.hex()})"
    return f"Fetch({name})"


class DeviceActor:
    """Serializes all device I/O through a request queue.

    Lifecycle: ``start()`` spawns the actor task, which opens the
    connection and resolves the readiness future once. After that the
    actor answers queued requests in arrival order until it takes a
    ``Shutdown`` off the queue.

    Per-request faults (transport errors, timeouts, protocol violations,
    confirmation mismatches) are delivered to that request's future and
    the actor keeps running.
    """

    def __init__(self, connection: Connection, queue_size: int = DEFAULT_QUEUE_SIZE):
        """Initialize device actor.

        Args:
            connection: Unopened transport. The actor takes ownership.
            queue_size: Maximum number of queued requests.
        """
        self._connection = connection
        self._queue: asyncio.Queue[tuple[Request, asyncio.Future]] = asyncio.Queue(maxsize=queue_size)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="usb")
        self._ready: asyncio.Future | None = None
        self._task: asyncio.Task | None = None
        self._state = ActorState.IDLE
        self._accepting = True
        self._stats = {
            "fetches": 0,
            "sets": 0,
            "faults": 0,
        }

    @property
    def state(self) -> ActorState:
        """Current lifecycle state."""
        return self._state

    @property
    def ready(self) -> bool:
        """Whether the readiness signal resolved successfully."""
        ready = self._ready
        return ready is not None and ready.done() and not ready.cancelled() and ready.exception() is None

    @property
    def connected(self) -> bool:
        """Whether the actor holds an open session and accepts requests."""
        return self._state == ActorState.READY and self._accepting

    @property
    def running(self) -> bool:
        """Whether the actor task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> dict:
        """Get request statistics."""
        return self._stats.copy()

    async def start(self) -> None:
        """Spawn the actor task. Use ``wait_ready()`` to await the session."""
        if self._task is not None:
            return

        self._ready = asyncio.get_running_loop().create_future()
        self._state = ActorState.CONNECTING
        self._task = asyncio.create_task(self._run(), name="beacn-device-actor")
        logger.debug("Device actor spawned")

    async def wait_ready(self, timeout: float | None = None) -> None:
        """Wait for the one-time readiness signal.

        Raises:
            DeviceError: If the device could not be opened or configured.
            TimeoutError: If ``timeout`` elapses first.
        """
        if self._ready is None:
            raise ActorStoppedError("Device actor not started")
        await asyncio.wait_for(asyncio.shield(self._ready), timeout)

    async def submit(self, request: Request, timeout: float | None = None) -> bytes:
        """Queue a request and wait for its reply.

        Args:
            request: Fetch, Set or Shutdown.
            timeout: Seconds to wait for a queue slot and the reply
                together. On expiry the caller stops waiting; a request
                already queued is still serviced and its reply discarded.

        Returns:
            The 4-byte wire value (all zeros for Shutdown).

        Raises:
            ActorStoppedError: If the actor is stopped, failed or shutting down.
            TimeoutError: If ``timeout`` elapses.
            GatewayError: Any fault raised while servicing the request.
        """
        if self._task is None:
            raise ActorStoppedError("Device actor not started")
        if not self._accepting or self._task.done():
            raise ActorStoppedError("Device actor is not accepting requests")

        if isinstance(request, Shutdown):
            self._accepting = False

        reply = asyncio.get_running_loop().create_future()
        # One deadline covers waiting for a queue slot and waiting for the reply
        async with asyncio.timeout(timeout):
            try:
                await self._queue.put((request, reply))
            except asyncio.CancelledError:
                # Nothing was queued
                if isinstance(request, Shutdown):
                    self._accepting = True
                raise
            if self._task.done():
                # Actor exited while we were blocked on a full queue
                self._fail_pending()
            return await reply

    async def fetch(self, parameter: Addressable, timeout: float | None = None) -> bytes:
        """Read a parameter's raw wire value."""
        return await self.submit(Fetch(parameter), timeout)

    async def set(self, parameter: Addressable, value: bytes, timeout: float | None = None) -> bytes:
        """Write a raw wire value and return the device-confirmed value."""
        return await self.submit(Set(parameter, value), timeout)

    async def shutdown(self, timeout: float | None = None) -> bytes:
        """Drain queued requests, stop the actor and release the device."""
        sentinel = await self.submit(Shutdown(), timeout)
        await self.join()
        return sentinel

    async def join(self) -> None:
        """Wait for the actor task to finish."""
        if self._task is not None:
            await self._task

    # ------------------------------------------------------------------------
    # Actor loop
    # ------------------------------------------------------------------------

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        assert self._ready is not None

        logger.info("Connecting to device")
        try:
            await loop.run_in_executor(self._executor, self._connection.open)
        except Exception as e:
            logger.error("Device setup failed: %s", e)
            self._state = ActorState.FAILED
            self._accepting = False
            self._ready.set_exception(e)
            self._fail_pending()
            self._executor.shutdown(wait=False)
            return

        self._state = ActorState.READY
        self._ready.set_result(None)
        logger.info("Device configured, actor ready")

        try:
            while True:
                request, reply = await self._queue.get()

                if isinstance(request, Shutdown):
                    self._state = ActorState.SHUTTING_DOWN
                    logger.info("Shutdown requested")
                    _resolve(reply, SHUTDOWN_SENTINEL)
                    break

                try:
                    value = await loop.run_in_executor(self._executor, self._execute, request)
                except GatewayError as e:
                    self._stats["faults"] += 1
                    logger.warning("%s failed: %s", _describe(request), e)
                    _reject(reply, e)
                except Exception as e:
                    self._stats["faults"] += 1
                    logger.exception("Unexpected error servicing %s", _describe(request))
                    _reject(reply, e)
                else:
                    _resolve(reply, value)
        finally:
            self._accepting = False
            try:
                await loop.run_in_executor(self._executor, self._connection.close)
            except Exception as e:
                logger.error("Error closing device: %s", e)
            self._executor.shutdown(wait=False)
            self._state = ActorState.STOPPED
            self._fail_pending()
            logger.info("Device actor stopped")

    def _fail_pending(self) -> None:
        """Reject every request still queued; none of them will be serviced."""
        while not self._queue.empty():
            request, reply = self._queue.get_nowait()
            logger.debug("Discarding %s", _describe(request))
            _reject(reply, ActorStoppedError(f"{_describe(request)} not serviced: device actor stopped"))

    # ------------------------------------------------------------------------
    # Transactions (worker thread only)
    # ------------------------------------------------------------------------

    def _execute(self, request: Request) -> bytes:
        param = request.parameter  # type: ignore[union-attr]

        if isinstance(request, Fetch):
            self._stats["fetches"] += 1
            return self._fetch(Frame.fetch(param.group, param.child_id))

        self._stats["sets"] += 1
        frame = Frame.set(param.group, param.child_id, request.value)
        self._connection.write(frame.to_bytes())

        # SET has no useful acknowledgement; read the value back instead
        confirmed = self._fetch(frame.as_fetch())
        if confirmed != request.value:
            raise ConfirmationMismatchError(
                f"Device holds {confirmed.hex()} after writing {request.value.hex()}",
                expected=request.value,
                actual=confirmed,
            )

        logger.debug("%s confirmed", _describe(request))
        return confirmed

    def _fetch(self, frame: Frame) -> bytes:
        self._connection.write(frame.to_bytes())
        reply = self._connection.read(REPLY_LEN)
        return validate_fetch_reply(frame, reply)


def _resolve(reply: asyncio.Future, value: bytes) -> None:
    # The caller may have stopped waiting
    if not reply.done():
        reply.set_result(value)


def _reject(reply: asyncio.Future, error: BaseException) -> None:
    if not reply.done():
        reply.set_exception(error)

"""TCP listener and per-connection request loop."""

import asyncio
import logging
import signal
from typing import Optional, Set

from .core.engine import price_option
from .core.types import PricingRequest, PricingResult
from .db.store import OptionStore
from .errors import DecodeError
from .wire import REQUEST_SIZE, decode_request, encode_result

logger = logging.getLogger(__name__)


class ConnectionSession:
    """Owns one client connection: read 43 bytes, price, persist, answer, repeat.

    A request is never read before the previous answer is written. Any short
    read, idle timeout or write error ends the session without a reply.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        store: OptionStore,
        idle_timeout: Optional[float] = None,
    ):
        self.reader = reader
        self.writer = writer
        self.store = store
        self.idle_timeout = idle_timeout or None
        self.peer = writer.get_extra_info("peername")
        self.handled = 0

    async def run(self) -> None:
        logger.info("Connection from %s", self.peer)
        try:
            while True:
                buf = await self._read_request()
                if buf is None:
                    break
                try:
                    req = decode_request(buf)
                except DecodeError as e:
                    logger.warning("Bad request from %s: %s", self.peer, e)
                    break

                result = await asyncio.to_thread(price_option, req)
                await self._persist(req, result)

                self.writer.write(encode_result(result))
                await self.writer.drain()
                self.handled += 1
                logger.debug("%s %s -> %s", self.peer, req, result)
        except (ConnectionError, OSError) as e:
            logger.warning("Connection error with %s: %s", self.peer, e)
        finally:
            await self._close()

    async def _read_request(self) -> Optional[bytes]:
        try:
            return await asyncio.wait_for(
                self.reader.readexactly(REQUEST_SIZE), timeout=self.idle_timeout
            )
        except asyncio.IncompleteReadError as e:
            if e.partial:
                logger.warning("Truncated request from %s (%d of %d bytes)",
                               self.peer, len(e.partial), REQUEST_SIZE)
            return None
        except asyncio.TimeoutError:
            logger.info("Idle timeout (%ss) for %s", self.idle_timeout, self.peer)
            return None

    async def _persist(self, req: PricingRequest, result: PricingResult) -> bool:
        try:
            ok = await asyncio.to_thread(self.store.record, req, result)
        except Exception:
            logger.exception("Persistence failed for %s", req)
            return False
        if not ok:
            logger.warning("Calculation not persisted for %s", req)
        return ok

    async def _close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError):
            pass
        logger.info("Closed connection from %s after %d request(s)", self.peer, self.handled)


class PricerServer:
    """Accepts connections and runs one ConnectionSession task per client."""

    def __init__(
        self,
        store: OptionStore,
        host: str = "0.0.0.0",
        port: int = 9000,
        idle_timeout: Optional[float] = None,
    ):
        self.store = store
        self.host = host
        self.requested_port = port
        self.idle_timeout = idle_timeout

        self._server: Optional[asyncio.AbstractServer] = None
        self._sessions: Set[asyncio.Task] = set()

    @property
    def port(self) -> int:
        """Bound port, resolved after start() (useful when binding port 0)."""
        if self._server is None or not self._server.sockets:
            return self.requested_port
        return self._server.sockets[0].getsockname()[1]

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        self._sessions.add(task)
        try:
            await ConnectionSession(reader, writer, self.store, self.idle_timeout).run()
        finally:
            self._sessions.discard(task)

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, self.host, self.requested_port)
        logger.info("Pricer daemon listening on %s:%d", self.host, self.port)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        await self._server.serve_forever()

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        for task in list(self._sessions):
            task.cancel()
        if self._sessions:
            await asyncio.gather(*self._sessions, return_exceptions=True)
        await self._server.wait_closed()
        self._server = None
        logger.info("Pricer daemon stopped")

    async def __aenter__(self) -> "PricerServer":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()


async def run_server(server: PricerServer) -> None:
    """Serve until SIGINT or SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            pass  # not supported on this platform

    await server.start()
    try:
        await stop.wait()
    finally:
        await server.stop()

"""Asyncio client for the pricer's binary protocol."""

import asyncio
import socket
from typing import Optional

from .core.types import PricingRequest, PricingResult
from .wire import RESPONSE_SIZE, decode_result, encode_request


class PricerClient:
    def __init__(self, host: str = "127.0.0.1", port: int = 9000, timeout: Optional[float] = 10.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    async def connect(self) -> None:
        self._reader, self._writer = await asyncio.wait_for(
            asyncio.open_connection(self.host, self.port), timeout=self.timeout
        )
        # one small request per round trip
        s = self._writer.get_extra_info("socket")
        if s is not None:
            s.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

    async def quote(self, req: PricingRequest) -> PricingResult:
        """Send one request and wait for its 24-byte answer."""
        if self._writer is None:
            await self.connect()
        self._writer.write(encode_request(req))
        await self._writer.drain()
        buf = await asyncio.wait_for(self._reader.readexactly(RESPONSE_SIZE), timeout=self.timeout)
        return decode_result(buf)

    async def close(self) -> None:
        if self._writer is None:
            return
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (ConnectionError, OSError):
            pass
        self._reader = self._writer = None

    async def __aenter__(self) -> "PricerClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

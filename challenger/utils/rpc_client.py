"""
JSON-RPC Client Utility

Provides a reusable JSON-RPC client for talking to the L1 endpoint.
Handles the shared aiohttp session, retries with exponential backoff for
transport errors and 5xx responses, and unwrapping of JSON-RPC envelopes.
"""

import asyncio
import itertools
from typing import Any, List, Optional

import aiohttp

from challenger.core.setup import logger
from challenger.utils.errors import QueryFailure, RpcResponseError


class RpcSessionManager:
    """Singleton manager for the shared aiohttp ClientSession.

    The challenger issues strictly sequential calls, so one small pool is
    enough for every component in the process.
    """

    _instance: Optional['RpcSessionManager'] = None
    _lock: Optional[asyncio.Lock] = None
    _session: Optional[aiohttp.ClientSession] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_session(cls) -> aiohttp.ClientSession:
        """Get or create the shared session.

        Returns:
            Shared ClientSession instance
        """
        async with cls._get_lock():
            if cls._session is None or cls._session.closed:
                connector = aiohttp.TCPConnector(
                    limit=8,
                    ttl_dns_cache=300,
                    enable_cleanup_closed=True,
                    keepalive_timeout=30,
                )
                timeout = aiohttp.ClientTimeout(total=None, connect=30)
                cls._session = aiohttp.ClientSession(
                    connector=connector,
                    timeout=timeout,
                    connector_owner=True
                )
            return cls._session

    @classmethod
    async def close(cls):
        """Close the shared session."""
        async with cls._get_lock():
            if cls._session and not cls._session.closed:
                await cls._session.close()
                cls._session = None
                logger.debug("RpcSessionManager: Closed shared session")


class RpcClient:
    """JSON-RPC 2.0 client over HTTP.

    Uses RpcSessionManager's shared session unless one is passed in.
    """

    def __init__(
        self,
        url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30,
        retry_config: Any = None,
    ):
        """Initialize RPC client.

        Args:
            url: JSON-RPC endpoint URL
            session: Optional ClientSession; the shared session is used otherwise
            timeout: Per-request timeout in seconds
            retry_config: Object with max_attempts and backoff_seconds
        """
        self.url = url
        self._session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.retry_config = retry_config
        self._ids = itertools.count(1)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = await RpcSessionManager.get_session()
        return self._session

    async def _post(self, method: str, params: List[Any]) -> Any:
        session = await self._get_session()
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        async with session.post(self.url, json=payload, timeout=self.timeout) as response:
            if response.status >= 500:
                body = await response.text()
                raise aiohttp.ClientResponseError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    message=body[:200],
                )
            if response.status >= 400:
                body = await response.text()
                raise QueryFailure(f"HTTP {response.status} from {method}: {body[:200]}", method)
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raw = await response.text()
                raise QueryFailure(f"Invalid JSON response to {method}: {raw[:200]}", method, e)

        if not isinstance(data, dict):
            raise QueryFailure(f"Unexpected response to {method}: {data!r}", method)
        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcResponseError(method, error.get("code", 0), error.get("message", ""), error.get("data"))
            raise RpcResponseError(method, 0, str(error))
        return data.get("result")

    async def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Execute a read call with retry logic.

        Transport errors and 5xx responses are retried with exponential backoff.
        JSON-RPC error objects are returned by the node deliberately and are not.

        Raises:
            QueryFailure: when every attempt failed
        """
        max_attempts = 1
        backoff = 1.0
        if self.retry_config:
            max_attempts = self.retry_config.max_attempts
            backoff = self.retry_config.backoff_seconds

        params = params or []
        last_error = None

        for attempt in range(max_attempts):
            try:
                logger.trace(f"RPC {method} {params}")
                return await self._post(method, params)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                if attempt == max_attempts - 1:
                    break
                logger.warning(f"RPC {method} failed: {e}. Retrying in {backoff}s...")

            await asyncio.sleep(backoff)
            backoff *= 2.0

        raise QueryFailure(
            f"Network error during {method} after {max_attempts} attempt(s): {last_error}",
            method,
            last_error,
        )

    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Execute a single-attempt call, used for broadcasts."""
        try:
            return await self._post(method, params or [])
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise QueryFailure(f"Network error during {method}: {e}", method, e)

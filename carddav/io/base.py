"""
What the components expect from a transport.
"""

from typing import Protocol, runtime_checkable

from carddav.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class AsyncIOProtocol(Protocol):
    """
    A transport executes one DAVRequest at a time and hands back the
    DAVResponse.  Error statuses are returned, not raised; connection
    failures and cancellation are raised as they are.

    AsyncIO is the aiohttp based implementation.  The tests use an
    in-memory CardDAV server instead.
    """

    async def execute(self, request: DAVRequest) -> DAVResponse: ...

    async def close(self) -> None: ...

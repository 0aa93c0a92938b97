"""
Transports for the CardDAV components.

Only HTTP happens here; building requests and reading responses is done
in carddav.protocol.

    from carddav.io import AsyncIO
    from carddav.protocol import CardDAVProtocol

    protocol = CardDAVProtocol("https://dav.example.com/addressbooks/me/default/")
    async with AsyncIO() as io:
        response = await io.execute(protocol.options_request())
"""

from .base import AsyncIOProtocol
from .async_ import AsyncIO

__all__ = [
    "AsyncIOProtocol",
    "AsyncIO",
]

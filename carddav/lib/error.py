#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from carddav import __version__

## Environmental variables prepended with "PYTHON_CARDDAV" are used for debug purposes,
## environmental variables prepended with "CARDDAV_" are for connection parameters
debug_dump_communication = bool(os.environ.get("PYTHON_CARDDAV_COMMDUMP", False))

## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_CARDDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("carddav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status, r.reason, r.body[:512].decode("utf-8", "replace"))


def weirdness(*reasons):
    from carddav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"
    status: Optional[int] = None

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        if status is not None:
            self.status = status

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class AuthorizationError(DAVError):
    """
    The client encountered an HTTP 401 or 403 error and is passing it on
    to the user. The url property will contain the url in question,
    the reason property will contain the excuse the server sent.
    """

    pass


class NotFoundError(DAVError):
    status = 404


class MethodNotAllowedError(DAVError):
    status = 405


class PreconditionFailedError(DAVError):
    """
    The server refused a conditional request (HTTP 412).  For a PUT
    with If-Match this means somebody else changed the resource.
    """

    status = 412


class MalformedResponseError(DAVError):
    """The server sent something that isn't a parseable multistatus document"""

    pass


class PropfindError(DAVError):
    pass


class ReportError(DAVError):
    pass


class PutError(DAVError):
    pass


class GetError(DAVError):
    pass


class OptionsError(DAVError):
    pass


exception_by_method: Dict[str, Type[DAVError]] = defaultdict(lambda: DAVError)
for method in (
    "propfind",
    "report",
    "put",
    "get",
    "options",
):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]

exception_by_status: Dict[int, Type[DAVError]] = {
    401: AuthorizationError,
    403: AuthorizationError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    412: PreconditionFailedError,
}

"""
CardDAV requests and the interpretation of their responses, without I/O.

CardDAVProtocol knows what to send (method, URL, headers, body) and how
to sort what comes back.  Executing the request is left to a transport,
see carddav.io.
"""

import base64
from typing import Dict, Iterable, List, NoReturn, Optional
from urllib.parse import urljoin, urlparse

from carddav.lib import error

from .types import (
    DAVMethod,
    DAVRequest,
    DAVResponse,
    Failed,
    MultistatusDocument,
    NotFound,
    Ok,
    Outcome,
    PreconditionFailed,
)
from .xml_builders import build_addressbook_multiget_body, build_propfind_body
from .xml_parsers import parse_multistatus

VCARD_CONTENT_TYPE = "text/vcard"
XML_CONTENT_TYPE = "application/xml; charset=utf-8"


class CardDAVProtocol:
    """
    Sans-I/O CardDAV protocol handler.

    Example:
        protocol = CardDAVProtocol("https://dav.example.com/addressbooks/me/default/")
        request = protocol.propfind_request("", ["getetag", "getcontenttype"], depth=1)
        outcome = protocol.classify(await io.execute(request))
        if isinstance(outcome, Ok):
            document = protocol.parse_multistatus(outcome.response, request)
    """

    def __init__(
        self,
        base_url: str = "",
        username: Optional[str] = None,
        password: Optional[str] = None,
        huge_tree: bool = False,
    ):
        """
        Args:
            base_url: relative paths given to the request builders are
                resolved against this one
            username, password: credentials for Basic authentication
            huge_tree: let lxml parse very large multistatus documents
        """
        self.base_url = base_url or ""
        self.username = username
        self.password = password
        self.huge_tree = huge_tree
        self._authorization = None
        if username and password:
            credentials = ("%s:%s" % (username, password)).encode("utf-8")
            self._authorization = "Basic " + base64.b64encode(credentials).decode()

    def _headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if content_type:
            headers["Content-Type"] = content_type
        if self._authorization:
            headers["Authorization"] = self._authorization
        return headers

    def resolve_url(self, path: str) -> str:
        """A full URL is kept, anything else is resolved against base_url"""
        if not path:
            return self.base_url
        if urlparse(path).scheme or not self.base_url:
            return path
        return urljoin(self.base_url, path)

    ## Request builders

    def propfind_request(
        self, path: str, props: Optional[List[str]] = None, depth: int = 0
    ) -> DAVRequest:
        """
        PROPFIND for the named properties, see
        xml_builders.build_propfind_body for the names understood.
        """
        headers = self._headers(XML_CONTENT_TYPE)
        headers["Depth"] = str(depth)
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=self.resolve_url(path),
            headers=headers,
            body=build_propfind_body(props),
        )

    def addressbook_multiget_request(
        self, path: str, hrefs: Iterable[str], include_data: bool = False
    ) -> DAVRequest:
        """
        addressbook-multiget REPORT (RFC 6352 section 8.7) on the
        collection at path, for the address objects at hrefs.  With
        include_data the vCards are asked for, not only the versions.
        """
        headers = self._headers(XML_CONTENT_TYPE)
        headers["Depth"] = "0"
        return DAVRequest(
            method=DAVMethod.REPORT,
            url=self.resolve_url(path),
            headers=headers,
            body=build_addressbook_multiget_body(hrefs, include_data=include_data),
        )

    def get_request(self, path: str) -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.GET, url=self.resolve_url(path), headers=self._headers()
        )

    def put_request(
        self,
        path: str,
        data: bytes,
        content_type: str = VCARD_CONTENT_TYPE,
        etag: Optional[str] = None,
    ) -> DAVRequest:
        """
        PUT of a vCard.  With etag the PUT is conditional (If-Match), the
        server is to refuse it with 412 if the resource changed since.
        """
        headers = self._headers(content_type)
        if etag:
            headers["If-Match"] = etag
        return DAVRequest(
            method=DAVMethod.PUT,
            url=self.resolve_url(path),
            headers=headers,
            body=data,
        )

    def options_request(self, path: str = "") -> DAVRequest:
        return DAVRequest(
            method=DAVMethod.OPTIONS,
            url=self.resolve_url(path),
            headers=self._headers(),
        )

    ## Response interpretation

    def classify(self, response: DAVResponse) -> Outcome:
        if response.ok:
            return Ok(response)
        if response.status == 404:
            return NotFound(response)
        if response.status == 412:
            return PreconditionFailed(response)
        return Failed(response)

    def parse_multistatus(
        self, response: DAVResponse, request: DAVRequest
    ) -> MultistatusDocument:
        """
        Parse the body of a PROPFIND or REPORT response.  Hrefs in it
        are relative to where the response was served from (after
        redirects), or to the request URL if the transport doesn't tell.

        Raises:
            MalformedResponseError: not XML, or not a multistatus document
        """
        return parse_multistatus(
            response.body,
            base_url=response.url or request.url,
            huge_tree=self.huge_tree,
        )


def raise_for_outcome(outcome: Outcome, request: DAVRequest) -> NoReturn:
    """
    Turn an outcome the caller didn't absorb into an exception.

    Statuses with a dedicated error class (401, 403, 404, 405, 412) get
    that one, everything else gets the error class of the request method.
    """
    response = outcome.response
    cls = error.exception_by_status.get(response.status)
    if cls is None:
        cls = error.exception_by_method[request.method.value.lower()]
    raise cls(url=request.url, reason=error.errmsg(response), status=response.status)

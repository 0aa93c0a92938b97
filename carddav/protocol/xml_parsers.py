"""
The multistatus parser.

PROPFIND and REPORT responses are turned into an immutable
MultistatusDocument; the components never see lxml trees of whole
responses, only the property elements of single entries.
"""

import logging
from typing import Optional

from lxml import etree
from lxml.etree import _Element

from carddav.elements import dav
from carddav.lib import error

from .types import DAVResponseEntry, MultistatusDocument

log = logging.getLogger(__name__)


def parse_multistatus(
    body: bytes,
    base_url: str = "",
    huge_tree: bool = False,
) -> MultistatusDocument:
    """
    Parse a 207 Multi-Status response body.

    Args:
        body: Raw XML response bytes
        base_url: URL the response was served from
        huge_tree: Allow parsing very large XML documents

    Returns:
        Immutable MultistatusDocument

    Raises:
        MalformedResponseError: If body is not well-formed XML or has no
            multistatus root
    """
    if not body or not body.strip():
        raise error.MalformedResponseError(base_url, "empty response body")

    parser = etree.XMLParser(huge_tree=huge_tree, resolve_entities=False)
    try:
        tree = etree.fromstring(body, parser)
    except etree.XMLSyntaxError as e:
        raise error.MalformedResponseError(base_url, str(e)) from e

    root = _strip_to_multistatus(tree)
    if root is None:
        raise error.MalformedResponseError(
            base_url, "expected a multistatus root element, got %s" % tree.tag
        )

    responses = tuple(
        _parse_response_element(elem) for elem in root if elem.tag == dav.Response.tag
    )
    return MultistatusDocument(base_url=base_url, responses=responses)


# Helper functions


def _strip_to_multistatus(tree: _Element) -> Optional[_Element]:
    """
    The multistatus element, which some servers wrap into an <xml>
    element.  None if the document is something else.
    """
    if tree.tag == "xml" and len(tree) > 0 and tree[0].tag == dav.MultiStatus.tag:
        return tree[0]
    if tree.tag == dav.MultiStatus.tag:
        return tree
    return None


def _parse_response_element(response: _Element) -> DAVResponseEntry:
    """
    Parse a single DAV:response element.

    Properties are collected from every propstat with a successful
    status.  Servers report requested-but-missing properties in a
    separate 404 propstat, those are left out.
    """
    status: Optional[str] = None
    href: Optional[str] = None
    properties: dict[str, _Element] = {}

    for elem in response:
        if elem.tag == dav.Status.tag:
            status = elem.text
        elif elem.tag == dav.Href.tag:
            if elem.text is not None and href is None:
                href = elem.text.strip()
        elif elem.tag == dav.PropStat.tag:
            propstat_status = elem.find(dav.Status.tag)
            if propstat_status is not None and not _is_success(propstat_status.text):
                continue
            prop = elem.find(dav.Prop.tag)
            if prop is None:
                continue
            for child in prop:
                properties.setdefault(child.tag, child)

    return DAVResponseEntry(
        href=href,
        status=_status_to_code(status),
        properties=properties,
    )


def _is_success(status: Optional[str]) -> bool:
    if not status:
        return True
    return 200 <= _status_to_code(status) < 300


def _status_to_code(status: Optional[str]) -> int:
    """Code of a status line like "HTTP/1.1 404 Not Found", 200 if missing or garbled"""
    if not status:
        return 200

    parts = status.split()
    if len(parts) >= 2:
        try:
            return int(parts[1])
        except ValueError:
            log.debug("unparseable status line %r", status)

    return 200

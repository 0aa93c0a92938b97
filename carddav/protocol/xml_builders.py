"""
Pure functions for building CardDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional

from lxml import etree

from carddav.elements import carddav
from carddav.elements import dav
from carddav.elements.base import BaseElement


def build_propfind_body(props: Optional[List[str]] = None) -> bytes:
    """
    Build PROPFIND request body XML.

    Args:
        props: List of property names to retrieve, i.e.
               ["getetag", "getcontenttype"].  Unknown names are
               rejected.

    Returns:
        UTF-8 encoded XML bytes
    """
    prop = dav.Prop() + [_prop_name_to_element(name) for name in props or []]
    propfind = dav.Propfind() + prop

    return etree.tostring(propfind.xmlelement(), encoding="utf-8", xml_declaration=True)


def build_addressbook_multiget_body(
    hrefs: Iterable[str],
    include_data: bool = False,
) -> bytes:
    """
    Build addressbook-multiget REPORT request body.

    Used to retrieve the versions (and optionally the vCards) of a set
    of address objects by their paths in a single request.

    Args:
        hrefs: Paths of the address objects, as the server knows them
        include_data: Include address-data in the response

    Returns:
        UTF-8 encoded XML bytes
    """
    props: List[BaseElement] = [dav.GetEtag(), dav.GetContentType()]
    if include_data:
        props.append(carddav.AddressData())

    elements: List[BaseElement] = [dav.Prop() + props]
    for href in hrefs:
        elements.append(dav.Href(href))

    multiget = carddav.AddressBookMultiGet() + elements

    return etree.tostring(multiget.xmlelement(), encoding="utf-8", xml_declaration=True)


# Property name to element mapping


def _prop_name_to_element(name: str) -> BaseElement:
    """
    Convert property name string to element object.

    Args:
        name: Property name (case-insensitive)

    Returns:
        BaseElement instance

    Raises:
        ValueError: for unknown properties
    """
    props: Dict[str, Any] = {
        "displayname": dav.DisplayName,
        "resourcetype": dav.ResourceType,
        "getetag": dav.GetEtag,
        "getcontenttype": dav.GetContentType,
        "current-user-principal": dav.CurrentUserPrincipal,
        "addressbook-home-set": carddav.AddressBookHomeSet,
        "address-data": carddav.AddressData,
    }

    name_lower = name.lower().replace("_", "-")
    if name_lower not in props:
        raise ValueError("unknown property %s" % name)
    return props[name_lower]()

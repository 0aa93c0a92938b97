#!/usr/bin/env python
from collections.abc import Iterable
from typing import ClassVar
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from carddav.lib.namespace import nsmap


class BaseElement:
    """
    A request body element.  Children are added with +, so a body reads
    like the XML it becomes:

        dav.Propfind() + (dav.Prop() + [dav.GetEtag(), dav.GetContentType()])
    """

    tag: ClassVar[Optional[str]] = None

    def __init__(self, value: Union[str, bytes, None] = None) -> None:
        self.children: List["BaseElement"] = []
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        self.value = value

    def __add__(
        self, other: Union["BaseElement", Iterable["BaseElement"]]
    ) -> "BaseElement":
        return self.append(other)

    def append(
        self, element: Union["BaseElement", Iterable["BaseElement"]]
    ) -> "BaseElement":
        if isinstance(element, Iterable):
            self.children.extend(element)
        else:
            self.children.append(element)
        return self

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("%s has no tag" % self.__class__.__name__)
        root = etree.Element(self.tag, nsmap=nsmap)
        ## text is escaped by lxml on serialization, an href with & or <
        ## is sent as proper character data
        if self.value is not None:
            root.text = self.value
        for child in self.children:
            root.append(child.xmlelement())
        return root


class ValuedBaseElement(BaseElement):
    """An element carrying text, like DAV:href"""

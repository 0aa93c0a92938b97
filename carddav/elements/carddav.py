#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from carddav.lib.namespace import ns


# Operations
class AddressBookMultiGet(BaseElement):
    tag: ClassVar[str] = ns("A", "addressbook-multiget")


# Properties
class AddressBookHomeSet(BaseElement):
    tag: ClassVar[str] = ns("A", "addressbook-home-set")


class AddressBook(BaseElement):
    tag: ClassVar[str] = ns("A", "addressbook")


class AddressData(ValuedBaseElement):
    tag: ClassVar[str] = ns("A", "address-data")

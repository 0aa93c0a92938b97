#!/usr/bin/env python
from typing import Dict
from typing import Optional

## The prefixes are the ones used on the wire by most CardDAV clients.
## Servers don't care about the prefixes, but it makes the communication
## dumps easier to read.
nsmap: Dict[str, str] = {
    "D": "DAV:",
    "A": "urn:ietf:params:xml:ns:carddav",
}


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name

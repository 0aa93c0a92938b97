"""
This file serves as a database of server peculiarities we have to
work around when talking CardDAV, and the knobs for turning the
workarounds on and off.

None of the workarounds are mandated by RFC 6352, they are observations
of how particular servers behave.  They are all enabled by default, as
they are harmless towards servers not having the peculiarity - but a
server may legitimately use a literal "None" as an ETag, so it's
possible to switch them off per server.
"""
import copy
from typing import Any
from typing import Dict
from typing import FrozenSet
from typing import Optional


class ServerQuirks:
    """
    An object of this class describes which workarounds to apply
    towards one server.

    types:
     * server-peculiarity - weird behaviour detected at the server side.
       The value is a boolean telling whether the workaround is active.
     * client-hints - values the client needs to know to deal with the
       server.  The value type is given in the feature description.
    """

    FEATURES: Dict[str, Dict[str, Any]] = {
        "etag-none-marks-collection": {
            "type": "server-peculiarity",
            "description": 'At least one server reports the collection itself in a depth 1 PROPFIND with the ETag "None".  When active, entries with the ETag "None" (any case) are never reported as address objects',
            "default": True,
        },
        "unparseable-content-types": {
            "type": "client-hints",
            "description": "Content types of address objects that are not vCards we can hand over to the synchronization engine.  SOGo stores distribution lists as text/x-vlist objects in the address book.  A list of strings",
            "default": ["text/x-vlist"],
        },
    }

    def __init__(self, quirks: Optional[Dict[str, Any]] = None) -> None:
        if isinstance(quirks, ServerQuirks):
            quirks = quirks._quirks
        self._quirks: Dict[str, Any] = {}
        for name, value in (quirks or {}).items():
            self.set_feature(name, value)

    def set_feature(self, feature: str, value: Any = True) -> None:
        feature_info = self.find_feature(feature)
        if feature_info["type"] == "server-peculiarity" and not isinstance(value, bool):
            raise ValueError(
                "%s takes a boolean, got %r" % (feature, value)
            )
        self._quirks[feature] = copy.deepcopy(value)

    def is_supported(self, feature: str) -> Any:
        """
        The configured value of a feature, or its default.
        """
        feature_info = self.find_feature(feature)
        if feature in self._quirks:
            return self._quirks[feature]
        return copy.deepcopy(feature_info["default"])

    @classmethod
    def find_feature(cls, feature: str) -> Dict[str, Any]:
        if feature not in cls.FEATURES:
            raise ValueError("unknown server quirk %s" % feature)
        return cls.FEATURES[feature]

    @property
    def none_etag_marks_collection(self) -> bool:
        return self.is_supported("etag-none-marks-collection")

    @property
    def unparseable_content_types(self) -> FrozenSet[str]:
        return frozenset(
            x.lower() for x in self.is_supported("unparseable-content-types")
        )

    def __repr__(self) -> str:
        return "ServerQuirks(%r)" % self._quirks


## Server descriptions.  Anything not mentioned is running with the
## defaults, which cover SOGo.

strict = {
    "etag-none-marks-collection": False,
    "unparseable-content-types": [],
}

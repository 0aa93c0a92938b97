#!/usr/bin/env python
from typing import Any
from typing import Optional
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import unquote
from urllib.parse import urljoin
from urllib.parse import urlparse


class URL:
    """
    Wraps an URL string, parsing it only when a component is asked for.
    Used internally, end users will pass plain strings.

    Addresses come in three shapes:

    1) relative to the collection, i.e. "contact.vcf" referring to
    "https://dav.example.com/addressbooks/someuser/default/contact.vcf"

    2) an absolute path, "/addressbooks/someuser/default/contact.vcf"

    3) a fully qualified URL.

    CardDAV servers mix the last two freely in href elements and
    Location headers, so anything received from the server goes through
    join() before it's used for a new request.
    """

    def __init__(self, url: Union[str, ParseResult]) -> None:
        if isinstance(url, ParseResult):
            self.url_parsed: Optional[ParseResult] = url
            self.url_raw: Optional[str] = None
        else:
            self.url_raw = url
            self.url_parsed = None

    def __bool__(self) -> bool:
        return bool(self.url_raw or self.url_parsed)

    @classmethod
    def objectify(cls, url: Union["URL", str, ParseResult, None]) -> Optional["URL"]:
        if url is None or isinstance(url, URL):
            return url
        return URL(url)

    ## scheme, netloc, path, etc are taken from the parsed URL
    def __getattr__(self, attr: str):
        if "url_parsed" not in vars(self):
            raise AttributeError(attr)
        if self.url_parsed is None:
            self.url_parsed = urlparse(self.url_raw)
        return getattr(self.url_parsed, attr)

    def __str__(self) -> str:
        if self.url_raw is None:
            self.url_raw = self.url_parsed.geturl()
        return self.url_raw

    def __repr__(self) -> str:
        return "URL(%s)" % str(self)

    def authority(self) -> "URL":
        """
        scheme and network location only, i.e. "https://dav.example.com"
        """
        return URL(ParseResult(self.scheme, self.netloc, "", "", "", ""))

    def decoded_path(self) -> str:
        return unquote(self.path)

    def join(self, path: Any) -> "URL":
        """
        Resolve path against self.  A relative path is resolved below the
        path of self (self is taken as a collection, trailing slash or
        not), an absolute path replaces it, and a full URL is returned as
        it is (a Location header may point to another host).  Dot
        segments are removed as in RFC 3986 section 5.2.
        """
        if not path or not str(path):
            return self
        path = URL.objectify(path)
        if path.scheme and path.netloc:
            return path

        base_path = self.path if self.path.endswith("/") else self.path + "/"
        joined = urljoin(base_path, path.path)
        return URL(
            ParseResult(
                self.scheme or path.scheme,
                self.netloc or path.netloc,
                joined,
                path.params,
                path.query,
                path.fragment,
            )
        )

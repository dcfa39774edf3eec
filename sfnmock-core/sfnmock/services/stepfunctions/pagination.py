"""
Offset pagination with opaque continuation tokens.

A token encodes the offset of the next page together with a fingerprint of the query that issued it. In strict mode
a token is only accepted by a query with the same fingerprint, i.e. the same operation and filter arguments.
"""

import json
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, TypeVar

from sfnmock.aws.api.stepfunctions import InvalidToken
from sfnmock.services.stepfunctions.validation import validate_max_results, validate_next_token
from sfnmock.utils.strings import base64_decode, base64_encode_urlsafe, md5, to_str

LOG = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100

_T = TypeVar("_T")

Query = Dict[str, Any]


def query_fingerprint(query: Optional[Query]) -> str:
    return md5(json.dumps(query or {}, sort_keys=True, default=str))


class PageToken:
    """Position of the next page of a listing, bound to the query that produced it."""

    def __init__(self, offset: int, fingerprint: Optional[str] = None):
        self.offset = offset
        self.fingerprint = fingerprint

    def encode(self) -> str:
        payload = {"offset": self.offset, "query": self.fingerprint}
        return base64_encode_urlsafe(json.dumps(payload, separators=(",", ":")))

    @classmethod
    def decode(cls, token: str) -> "PageToken":
        try:
            payload = json.loads(to_str(base64_decode(token)))
        except ValueError:
            raise InvalidToken(f"Invalid Token: '{token}'")
        if not isinstance(payload, dict):
            raise InvalidToken(f"Invalid Token: '{token}'")
        offset = payload.get("offset")
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise InvalidToken(f"Invalid Token: '{token}'")
        return cls(offset=offset, fingerprint=payload.get("query"))

    def __eq__(self, other):
        return (
            isinstance(other, PageToken)
            and self.offset == other.offset
            and self.fingerprint == other.fingerprint
        )

    def __repr__(self):
        return f"<PageToken offset={self.offset} query={self.fingerprint}>"


class Page(NamedTuple):
    items: List[Any]
    next_token: Optional[str]


def paginate(
    items: Sequence[_T],
    max_results: Optional[int] = None,
    next_token: Optional[str] = None,
    query: Optional[Query] = None,
    strict: bool = True,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """
    Returns the page of ``items`` that starts at the position encoded in ``next_token``.

    :param items: the complete, already filtered and ordered result set
    :param max_results: the page size, ``default_page_size`` if omitted
    :param next_token: the token returned with the previous page, if any
    :param query: the operation name and filter arguments of the listing
    :param strict: whether to reject tokens issued by a different query
    :param default_page_size: page size used when ``max_results`` is omitted
    :raises InvalidRange: if ``max_results`` or ``next_token`` are out of bounds
    :raises InvalidToken: if ``next_token`` cannot be decoded or does not fit the result set
    """
    page_size = validate_max_results(max_results) if max_results is not None else default_page_size
    fingerprint = query_fingerprint(query)

    offset = 0
    if next_token:
        validate_next_token(next_token)
        page_token = PageToken.decode(next_token)
        if strict and page_token.fingerprint != fingerprint:
            LOG.debug("Rejecting page token issued by a different query: %s", page_token)
            raise InvalidToken(f"Invalid Token: '{next_token}'")
        if not 0 <= page_token.offset <= len(items):
            raise InvalidToken(f"Invalid Token: '{next_token}'")
        offset = page_token.offset

    end = offset + page_size
    page = list(items[offset:end])
    if end < len(items):
        return Page(items=page, next_token=PageToken(end, fingerprint).encode())
    return Page(items=page, next_token=None)

import pytest

from sfnmock.aws.api.stepfunctions import InvalidToken
from sfnmock.services.stepfunctions.pagination import (
    Page,
    PageToken,
    paginate,
    query_fingerprint,
)
from sfnmock.services.stepfunctions.validation import InvalidRange

QUERY = {"operation": "ListStateMachines"}


def _collect(items, max_results, query=None, strict=True):
    pages = []
    next_token = None
    while True:
        page = paginate(items, max_results=max_results, next_token=next_token, query=query, strict=strict)
        pages.append(page.items)
        next_token = page.next_token
        if not next_token:
            return pages


def test_single_page():
    assert paginate([1, 2, 3], query=QUERY) == Page(items=[1, 2, 3], next_token=None)


def test_empty_result_set_has_no_token():
    assert paginate([], max_results=10, query=QUERY) == Page(items=[], next_token=None)


@pytest.mark.parametrize("max_results", [1, 2, 3, 7, 8, 100])
def test_exhaustive_pagination(max_results):
    items = list(range(7))
    pages = _collect(items, max_results, query=QUERY)

    assert [item for page in pages for item in page] == items
    assert all(len(page) <= max_results for page in pages)
    assert all(pages)


def test_exact_multiple_has_no_trailing_token():
    page = paginate([1, 2, 3, 4], max_results=2, query=QUERY)
    assert page.items == [1, 2]
    assert page.next_token

    page = paginate([1, 2, 3, 4], max_results=2, next_token=page.next_token, query=QUERY)
    assert page.items == [3, 4]
    assert page.next_token is None


def test_default_page_size():
    page = paginate(list(range(5)), query=QUERY, default_page_size=2)
    assert page.items == [0, 1]
    assert page.next_token


@pytest.mark.parametrize("max_results", [0, -1, 1001])
def test_max_results_out_of_range(max_results):
    with pytest.raises(InvalidRange):
        paginate([1, 2, 3], max_results=max_results, query=QUERY)


def test_token_too_long():
    with pytest.raises(InvalidRange):
        paginate([1, 2, 3], next_token="a" * 1025, query=QUERY)


def test_malformed_token():
    with pytest.raises(InvalidToken) as exc:
        paginate([1, 2, 3], next_token="not-a-token", query=QUERY)
    assert exc.value.code == "InvalidToken"


@pytest.mark.parametrize("offset", [-1, 4])
def test_token_outside_of_result_set(offset):
    token = PageToken(offset, query_fingerprint(QUERY)).encode()
    with pytest.raises(InvalidToken):
        paginate([1, 2, 3], next_token=token, query=QUERY)


def test_strict_tokens_are_bound_to_their_query():
    items = list(range(5))
    page = paginate(items, max_results=2, query={"operation": "ListExecutions", "statusFilter": "RUNNING"})

    with pytest.raises(InvalidToken):
        paginate(
            items,
            max_results=2,
            next_token=page.next_token,
            query={"operation": "ListExecutions", "statusFilter": "FAILED"},
        )


def test_lenient_tokens_are_accepted_by_any_query():
    items = list(range(5))
    page = paginate(items, max_results=2, query={"operation": "ListActivities"}, strict=False)

    page = paginate(
        items,
        max_results=2,
        next_token=page.next_token,
        query={"operation": "ListStateMachines"},
        strict=False,
    )
    assert page.items == [2, 3]


def test_page_token_encoding():
    token = PageToken(42, query_fingerprint(QUERY))
    encoded = token.encode()

    assert "=" not in encoded
    assert PageToken.decode(encoded) == token


def test_query_fingerprint_ignores_key_order():
    assert query_fingerprint({"a": 1, "b": None}) == query_fingerprint({"b": None, "a": 1})
    assert query_fingerprint(None) == query_fingerprint({})
    assert query_fingerprint({"a": 1}) != query_fingerprint({"a": 2})

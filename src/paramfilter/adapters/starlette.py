"""
Starlette Adapter

Builds query-string stores from incoming requests and renders the URL a
client should be sent to once the filter has rewritten the query.
"""

from typing import Iterable, Optional, Union

from starlette.datastructures import URL
from starlette.requests import Request
from starlette.responses import RedirectResponse

from ..app.filter import ParamsFilter
from ..config import FilterConfig
from ..core.fields import FieldSchema, FieldLike
from ..persistence.query_string import QueryStringStore


def store_from_request(request: Request) -> QueryStringStore:
    """Query-string store holding the request's query parameters."""
    return QueryStringStore.from_query_params(request.query_params)


def url_with_params(url: Union[str, URL], store: QueryStringStore) -> URL:
    """``url`` with its query replaced by the store's current query string."""
    return URL(str(url)).replace(query=store.query_string)


def filter_from_request(request: Request,
                        fields: Union[FieldSchema, Iterable[FieldLike], None] = None,
                        config: Optional[FilterConfig] = None) -> ParamsFilter:
    """Run a filter against the request's query; defaults are seeded immediately."""
    return ParamsFilter(store_from_request(request), fields, config)


def redirect_if_changed(request: Request, params: ParamsFilter,
                        status_code: int = 303) -> Optional[RedirectResponse]:
    """
    Redirect to the canonical URL when the filter changed the query.

    Returns None when the request's query already matches the store.
    """
    store = params.store
    if not isinstance(store, QueryStringStore):
        raise TypeError("redirect_if_changed requires a QueryStringStore")

    if store.to_snapshot() == QueryStringStore(request.query_params).to_snapshot():
        return None
    return RedirectResponse(str(url_with_params(request.url, store)), status_code=status_code)

"""
ParamFilter Persistence Layer - Query String Backend

Store backed by a URL query string, parsed and rendered with starlette's
``QueryParams``.
"""

from typing import List, Tuple, Union

from starlette.datastructures import QueryParams

from .memory import MemoryParamStore


def parse_query_string(query: Union[str, QueryParams]) -> List[Tuple[str, str]]:
    """Parse a query string; the first occurrence of a repeated key wins."""
    params = query if isinstance(query, QueryParams) else QueryParams(query.lstrip("?"))
    seen = {}
    for key, value in params.multi_items():
        seen.setdefault(key, value)
    return list(seen.items())


class QueryStringStore(MemoryParamStore):
    """
    Query-string store.

    ``navigate()`` models the browser moving to a new URL: the whole query
    is replaced as one mutation.
    """

    def __init__(self, query: Union[str, QueryParams] = ""):
        super().__init__(parse_query_string(query))

    @classmethod
    def from_query_params(cls, params: QueryParams) -> 'QueryStringStore':
        return cls(params)

    @property
    def query_params(self) -> QueryParams:
        return QueryParams(self.to_snapshot())

    @property
    def query_string(self) -> str:
        return str(self.query_params)

    def navigate(self, query: Union[str, QueryParams]) -> bool:
        """Replace the store content with ``query``."""
        return self.replace(parse_query_string(query))

    def __str__(self) -> str:
        return self.query_string

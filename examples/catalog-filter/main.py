#!/usr/bin/env python3
"""
ParamFilter Catalog Demo

A product listing whose filters live in the URL query string:
- ``category`` and ``brand`` form a dependency chain (brand depends on category)
- ``model`` depends on ``brand``
- ``page`` defaults to 1 and is reset whenever the category changes

Run with any ASGI server, e.g. ``uvicorn main:app``, or run this file to
see the filter react to a few writes in the console.
"""

import logging

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from paramfilter import FilterConfig, LoggingConfig, QueryStringStore, configure_logging, use_params_filter
from paramfilter.adapters import filter_from_request, redirect_if_changed

CATALOG_FIELDS = [
    {"name": "category", "type": "string"},
    {"name": "brand", "type": "string", "dependsOn": ["category"]},
    {"name": "model", "type": "string", "dependsOn": ["brand"]},
    {"name": "colors", "type": "array-of-string"},
    {"name": "in_stock", "type": "boolean", "defaultValue": True},
    {"name": "page", "type": "number", "defaultValue": 1, "dependsOn": ["category"]},
]


async def products(request: Request):
    params = filter_from_request(request, CATALOG_FIELDS)

    # Send the client to the canonical URL once defaults are filled in
    redirect = redirect_if_changed(request, params)
    if redirect is not None:
        return redirect

    return JSONResponse({"filters": dict(params.field_values)})


app = Starlette(routes=[Route("/products", products)])


def console_demo():
    configure_logging(LoggingConfig(level="DEBUG"))
    logger = logging.getLogger("paramfilter.examples.catalog")

    store = QueryStringStore("category=phones&brand=acme&model=x1&page=3")
    with use_params_filter(store, CATALOG_FIELDS, FilterConfig()) as params:
        logger.info(f"Initial: {store.query_string}")

        params.set_field("colors", ["black", "white"])
        logger.info(f"Colors set: {store.query_string}")

        params.set_field("category", "laptops")
        logger.info(f"Category changed: {store.query_string}")

        store.navigate("category=tablets&brand=acme&page=2")
        logger.info(f"After navigation: {store.query_string}")
        logger.info(f"Values: {dict(params.field_values)}")


if __name__ == "__main__":
    console_demo()

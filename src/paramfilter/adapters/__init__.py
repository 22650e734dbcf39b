"""
Web framework adapters.
"""

from .starlette import store_from_request, url_with_params, filter_from_request, redirect_if_changed

__all__ = ["store_from_request", "url_with_params", "filter_from_request", "redirect_if_changed"]

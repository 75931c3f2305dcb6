"""Transport adapters for the administrative API."""

from permit_setup.api.adapters.base import ApiRequest, ApiResponse, BaseAdapter
from permit_setup.api.adapters.http import HttpAdapter

__all__ = ["ApiRequest", "ApiResponse", "BaseAdapter", "HttpAdapter"]

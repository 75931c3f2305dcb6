"""
Administrative API transport for Permit Setup.
"""

from permit_setup.api.client import PermitApiClient
from permit_setup.api.result import ApiResult, ResultKind

__all__ = ["ApiResult", "PermitApiClient", "ResultKind"]

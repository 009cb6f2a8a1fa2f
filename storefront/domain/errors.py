# storefront/domain/errors.py
"""
Błędy domenowe.

Każdy błąd niesie status HTTP i kod maszynowy, handler w warstwie API
zamienia go na kopertę ``{"success": false, "error": {...}}``.
Dziedziczenie po wbudowanych wyjątkach zostawia możliwość ``except ValueError``.
"""
from typing import Dict, List, Optional


class StoreError(Exception):
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details


class BusinessRuleError(StoreError, ValueError):
    status_code = 400


class NotFoundError(StoreError, LookupError):
    status_code = 404
    code = "NOT_FOUND"


class ForbiddenError(StoreError, PermissionError):
    status_code = 403
    code = "FORBIDDEN"


class ConflictError(StoreError, RuntimeError):
    status_code = 409
    code = "CONFLICT"

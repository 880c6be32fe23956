"""Recoverable errors raised by the service layer and rendered by the API."""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(ValueError):
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DomainError):
    """Missing or invalid input, or a request the current stock cannot satisfy."""
    status_code = 400


class NotFoundError(DomainError):
    """Unknown patient, store, DC, SKU, order or shipment."""
    status_code = 404

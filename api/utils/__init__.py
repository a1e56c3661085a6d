"""API utility modules."""

from .errors import STATUS_BY_KIND, http_error

__all__ = ["STATUS_BY_KIND", "http_error"]

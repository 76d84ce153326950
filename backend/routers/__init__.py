"""API Routers."""

from . import charts
from . import upload

__all__ = ["charts", "upload"]

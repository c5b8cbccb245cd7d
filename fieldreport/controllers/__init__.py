"""FastAPI routers acting as controllers in the MVC architecture."""

from . import reports

__all__ = ["reports"]

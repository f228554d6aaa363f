"""Application services."""

from jsonpage.services.page_service import PageService, RenderedPage

__all__ = ["PageService", "RenderedPage"]

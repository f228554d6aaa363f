"""
Page service.

Runs one page request end to end:

1. Read the document bytes (``index.json`` or ``index.<name>.json``)
2. Decode into an OrderedDocument and parse its flags
3. In design mode, resolve ``designprompt`` to a cached design
4. Capture one registry snapshot and render the page with it
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jsonpage.domain.design_cache import DesignCache
from jsonpage.domain.document import OrderedDocument, decode_document
from jsonpage.domain.flags import PageFlags
from jsonpage.domain.registry import RegistryStore, TemplateRegistry
from jsonpage.domain.renderer import PageRenderer
from jsonpage.errors import (
    DesignCacheError,
    DocumentNotFoundError,
    DocumentReadError,
)
from jsonpage.observability.logging import ContextLogger, get_logger
from jsonpage.settings import Settings


logger = get_logger(__name__)

DEFAULT_DOCUMENT = "index.json"

DOCUMENT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class RenderedPage:
    """Result of a page render."""
    html: str
    document: str
    design_id: Optional[str] = None


class PageService:
    """Coordinates document loading, design resolution and rendering."""

    def __init__(
        self,
        settings: Settings,
        store: Optional[RegistryStore] = None,
        design_cache: Optional[DesignCache] = None,
        renderer: Optional[PageRenderer] = None,
    ):
        self.settings = settings
        self.store = store or RegistryStore(settings.components_dir, settings.cache_dir)
        self.design_cache = design_cache or DesignCache(settings.cache_dir)
        self.renderer = renderer or PageRenderer(design_mode=settings.ai_design)

    # =========================================================================
    # Documents
    # =========================================================================

    def document_path(self, name: Optional[str] = None) -> Path:
        """
        Map a document name to its file.

        Raises:
            DocumentNotFoundError: If the name contains anything but
                letters, digits, underscores and hyphens
        """
        if name is None:
            return self.settings.content_dir / DEFAULT_DOCUMENT
        if not DOCUMENT_NAME_PATTERN.match(name):
            raise DocumentNotFoundError(f"Invalid document name: {name!r}")
        return self.settings.content_dir / f"index.{name}.json"

    def load_document(self, name: Optional[str] = None) -> OrderedDocument:
        path = self.document_path(name)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"Document not found: {path.name}") from e
        except OSError as e:
            raise DocumentReadError(f"Could not read {path.name}: {e}") from e
        return decode_document(raw)

    # =========================================================================
    # Designs
    # =========================================================================

    def resolve_design(
        self,
        flags: PageFlags,
        log: Optional[ContextLogger] = None,
    ) -> Optional[str]:
        """
        Resolve the document's design prompt, if design mode allows it.

        Cache failures are logged and yield None so the page still renders
        with the default templates.
        """
        log = log or logger
        if not self.settings.ai_design or not flags.designprompt:
            return None
        try:
            return self.design_cache.resolve(flags.designprompt)
        except DesignCacheError as e:
            log.error(f"Design resolution failed, using default templates: {e}")
            return None

    def registry_for(self, design_id: Optional[str]) -> TemplateRegistry:
        return self.store.for_design(design_id)

    # =========================================================================
    # Pages
    # =========================================================================

    def render_page(
        self,
        name: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> RenderedPage:
        """
        Render a named document (or the default one).

        Args:
            name: Alternate document name, None for ``index.json``
            request_id: Request id bound into log records

        Returns:
            RenderedPage with the HTML

        Raises:
            DocumentNotFoundError: Unknown or invalid document name
            DocumentReadError: Document file unreadable
            DocumentDecodeError: Document is not a JSON object
        """
        log = logger.with_context(request_id=request_id, document=name or "index")

        document = self.load_document(name)
        flags = PageFlags.from_mapping(document.flags)

        design_id = self.resolve_design(flags, log)
        registry = self.registry_for(design_id)

        html = self.renderer.render(document.blocks, flags, registry)

        log.info(
            f"Rendered {len(document.blocks)} blocks",
            design_id=design_id,
            templates=len(registry),
        )
        return RenderedPage(html=html, document=self.document_path(name).name, design_id=design_id)

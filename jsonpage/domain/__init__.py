"""Domain layer: document model, templates, tag resolution, rendering and designs."""

from jsonpage.domain.document import (
    FLAGS_KEY,
    ContentBlock,
    OrderedDocument,
    decode_document,
)
from jsonpage.domain.flags import CSS_LIBRARIES, PageFlags
from jsonpage.domain.registry import RegistryStore, TemplateRegistry, read_layer
from jsonpage.domain.resolver import (
    STANDARD_TAGS,
    ActionKind,
    RenderAction,
    render_builtin,
    resolve_tag,
)
from jsonpage.domain.text import display_text
from jsonpage.domain.renderer import PageRenderer, script_json
from jsonpage.domain.design_cache import (
    DesignCache,
    DesignRecord,
    DesignStyle,
    derive_style,
    synthesize_templates,
)

__all__ = [
    # Document
    "FLAGS_KEY",
    "ContentBlock",
    "OrderedDocument",
    "decode_document",
    # Flags
    "CSS_LIBRARIES",
    "PageFlags",
    # Templates
    "RegistryStore",
    "TemplateRegistry",
    "read_layer",
    # Resolution
    "STANDARD_TAGS",
    "ActionKind",
    "RenderAction",
    "display_text",
    "render_builtin",
    "resolve_tag",
    # Rendering
    "PageRenderer",
    "script_json",
    # Designs
    "DesignCache",
    "DesignRecord",
    "DesignStyle",
    "derive_style",
    "synthesize_templates",
]

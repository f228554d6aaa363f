"""
Page renderer.

Turns an OrderedDocument into a complete HTML page:

- Head with optional CSS framework tags selected by ``flags.csslib``
- One script block exposing non-standard tags as ``customContent``
- Body with one container per content block, tags in source order

Flags are read, never written: nothing from ``flags`` reaches the output
except the fixed framework tags they select.
"""

import json
import logging
from typing import Any, AbstractSet, Dict, Iterable, List, Mapping, Union

from markupsafe import Markup, escape

from jsonpage.domain.document import ContentBlock
from jsonpage.domain.flags import PageFlags
from jsonpage.domain.registry import TemplateRegistry
from jsonpage.domain.resolver import (
    STANDARD_TAGS,
    ActionKind,
    RenderAction,
    render_builtin,
    resolve_tag,
)


logger = logging.getLogger(__name__)


CSS_LIBRARY_TAGS: Mapping[str, str] = {
    "bootstrap": (
        '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css">\n'
        '<script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>\n'
    ),
    "tailwind": (
        '<script src="https://cdn.tailwindcss.com"></script>\n'
    ),
    "bulma": (
        '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bulma@1.0.2/css/bulma.min.css">\n'
    ),
    "materialize": (
        '<link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/materialize/1.0.0/css/materialize.min.css">\n'
        '<script src="https://cdnjs.cloudflare.com/ajax/libs/materialize/1.0.0/js/materialize.min.js"></script>\n'
    ),
}

PAGE_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; line-height: 1.6; padding: 20px; max-width: 800px; margin: 0 auto; }}
img {{ max-width: 100%; height: auto; }}
</style>
"""

DESIGN_MODE_STYLE = """<style>
body { background: linear-gradient(135deg, #f5f7fa 0%, #c3cfe2 100%); min-height: 100vh; }
.container { background: rgba(255,255,255,0.8); padding: 40px; border-radius: 12px; margin-top: 40px; }
</style>
"""

# Characters that could end the script element or break JS string parsing.
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def script_json(value: Any) -> str:
    """Serialize a value as JSON that is safe to embed in a <script> element."""
    encoded = json.dumps(value, ensure_ascii=False, allow_nan=False)
    for char, replacement in _SCRIPT_ESCAPES.items():
        encoded = encoded.replace(char, replacement)
    return encoded


def _comment_safe(text: str) -> str:
    return str(escape(text)).replace("--", "&#45;&#45;")


class PageRenderer:
    """
    Renders full pages from content blocks and a template snapshot.

    The registry is passed per call; the renderer holds no template state.
    """

    def __init__(
        self,
        standard_tags: AbstractSet[str] = STANDARD_TAGS,
        design_mode: bool = False,
        title: str = "JSON Server",
    ):
        self.standard_tags = standard_tags
        self.design_mode = design_mode
        self.title = title

    def resolve(self, tag: str, value: Any, registry: TemplateRegistry) -> RenderAction:
        return resolve_tag(tag, value, registry, self.standard_tags)

    def collect_side_channel(
        self,
        blocks: Iterable[ContentBlock],
        registry: TemplateRegistry,
    ) -> Dict[str, Any]:
        """
        First pass: gather data-only tags across the whole document.

        Returns:
            Dict mapping tag -> last value seen in document order
        """
        side_channel: Dict[str, Any] = {}
        for block in blocks:
            for tag, value in block:
                if self.resolve(tag, value, registry).kind is ActionKind.INJECT_AS_DATA:
                    # Re-inserting moves nothing: dict keeps first position, last value.
                    side_channel[tag] = value
        return side_channel

    def render_side_channel(self, side_channel: Mapping[str, Any]) -> str:
        if not side_channel:
            return ""
        lines = ["<script>", "var customContent = {};"]
        for tag, value in side_channel.items():
            lines.append(f"customContent[{script_json(tag)}] = {script_json(value)};")
        lines.append("</script>")
        return "\n".join(lines) + "\n"

    def render_head(self, flags: PageFlags, side_channel: Mapping[str, Any]) -> str:
        parts = [PAGE_HEAD.format(title=escape(self.title))]
        if flags.csslib:
            parts.append(CSS_LIBRARY_TAGS[flags.csslib])
        parts.append(self.render_side_channel(side_channel))
        if self.design_mode:
            parts.append(DESIGN_MODE_STYLE)
        parts.append("</head>\n")
        return "".join(parts)

    def render_tag(self, tag: str, value: Any, registry: TemplateRegistry) -> str:
        """
        Render one tag according to its resolved action.

        Template failures are contained: the tag is replaced by a diagnostic
        comment and the caller carries on with the next tag.
        """
        action = self.resolve(tag, value, registry)

        if action.kind is ActionKind.INJECT_AS_DATA:
            return ""

        if action.kind is ActionKind.USE_BUILTIN:
            return str(render_builtin(tag, value))

        template = registry.get(action.name)
        try:
            return template.render(value=value, tag=tag)
        except Exception as e:
            logger.warning(
                f"Template {action.name} failed for tag {tag!r}: {e}",
                exc_info=True,
            )
            return f'<!-- render error: tag "{_comment_safe(tag)}" ({type(e).__name__}) -->'

    def render_block(self, block: ContentBlock, registry: TemplateRegistry) -> str:
        parts: List[str] = [str(Markup('<div class="block" id="{}">').format(block.identifier))]
        for tag, value in block:
            parts.append(self.render_tag(tag, value, registry))
        parts.append("</div>")
        return "".join(parts)

    def render(
        self,
        blocks: Iterable[ContentBlock],
        flags: Union[PageFlags, Mapping[str, Any], None],
        registry: TemplateRegistry,
    ) -> str:
        """
        Render a complete HTML page.

        Args:
            blocks: Content blocks in document order
            flags: Page flags (model or raw mapping)
            registry: Template snapshot used for the whole page

        Returns:
            The HTML document
        """
        blocks = tuple(blocks)
        if not isinstance(flags, PageFlags):
            flags = PageFlags.from_mapping(flags or {})

        side_channel = self.collect_side_channel(blocks, registry)

        parts = [self.render_head(flags, side_channel), '<body><div class="container">\n']
        for block in blocks:
            parts.append(self.render_block(block, registry))
            parts.append("\n")
        parts.append("</div></body></html>\n")
        return "".join(parts)

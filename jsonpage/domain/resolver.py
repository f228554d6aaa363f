"""
Per-tag rendering decision and built-in element rendering.

Every (tag, value) pair of a content block resolves to exactly one action,
in strict precedence:

1. A registered template named ``<tag>.html`` or ``<tag>`` (suffixed wins)
2. A built-in HTML element, when ``tag`` is a standard tag
3. Client-side data injection for everything else
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, AbstractSet, Optional

from markupsafe import Markup, escape

from jsonpage.domain.registry import TEMPLATE_SUFFIX, TemplateRegistry
from jsonpage.domain.text import display_text


STANDARD_TAGS = frozenset((
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "div", "span", "ul", "ol", "li",
    "img", "a", "button", "input", "form",
    "table", "tr", "td", "th", "thead", "tbody",
    "section", "article", "header", "footer", "nav",
    "main", "aside", "figure", "figcaption",
))

LIST_TAGS = frozenset(("ul", "ol"))


class ActionKind(str, Enum):
    """How a tag gets rendered."""
    USE_TEMPLATE = "use_template"
    USE_BUILTIN = "use_builtin"
    INJECT_AS_DATA = "inject_as_data"


@dataclass(frozen=True)
class RenderAction:
    """Resolved action for one tag; ``name`` is the template or element name."""
    kind: ActionKind
    name: Optional[str] = None

    @classmethod
    def use_template(cls, name: str) -> "RenderAction":
        return cls(ActionKind.USE_TEMPLATE, name)

    @classmethod
    def use_builtin(cls, tag: str) -> "RenderAction":
        return cls(ActionKind.USE_BUILTIN, tag)

    @classmethod
    def inject_as_data(cls) -> "RenderAction":
        return cls(ActionKind.INJECT_AS_DATA)

    @property
    def emits_markup(self) -> bool:
        return self.kind is not ActionKind.INJECT_AS_DATA


def resolve_tag(
    tag: str,
    value: Any,
    registry: TemplateRegistry,
    standard_tags: AbstractSet[str] = STANDARD_TAGS,
) -> RenderAction:
    """
    Decide how a single tag is rendered.

    Args:
        tag: Tag name from the content block
        value: The tag's JSON value (unused by the decision itself)
        registry: Template snapshot captured for this render
        standard_tags: Element names eligible for built-in rendering

    Returns:
        The RenderAction for this tag
    """
    suffixed = f"{tag}{TEMPLATE_SUFFIX}"
    if suffixed in registry:
        return RenderAction.use_template(suffixed)
    if tag in registry:
        return RenderAction.use_template(tag)
    if tag in standard_tags:
        return RenderAction.use_builtin(tag)
    return RenderAction.inject_as_data()


def render_builtin(tag: str, value: Any) -> Markup:
    """
    Render a standard tag as plain HTML.

    - ``img``: the value becomes the image source
    - ``ul``/``ol``: one list item per member; a scalar becomes a single item
    - anything else: ``<tag>value</tag>``

    All inserted text is HTML-escaped.
    """
    if tag == "img":
        return Markup('<img src="{}" alt="Image">').format(display_text(value))

    if tag in LIST_TAGS:
        members = value if isinstance(value, list) else [value]
        items = Markup("").join(
            Markup("<li>{}</li>").format(display_text(member)) for member in members
        )
        return Markup(f"<{tag}>") + items + Markup(f"</{tag}>")

    return Markup(f"<{tag}>") + escape(display_text(value)) + Markup(f"</{tag}>")

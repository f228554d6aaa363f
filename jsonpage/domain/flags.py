"""
Server-only page flags.

Flags steer rendering (CSS framework, design prompt) but are never written
into the page. Unknown keys are kept on the model as extras.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from jsonpage.domain.text import display_text


CSS_LIBRARIES = ("bootstrap", "tailwind", "bulma", "materialize")


class PageFlags(BaseModel):
    """Recognized flags from the document's ``flags`` entry."""

    model_config = ConfigDict(extra="allow", frozen=True)

    csslib: Optional[str] = None
    designprompt: Optional[str] = None

    @field_validator("csslib", mode="before")
    @classmethod
    def normalize_csslib(cls, value: Any) -> Optional[str]:
        """Lower-case known frameworks; anything else counts as absent."""
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        return name if name in CSS_LIBRARIES else None

    @field_validator("designprompt", mode="before")
    @classmethod
    def coerce_designprompt(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, str):
            return value
        return display_text(value)

    @classmethod
    def from_mapping(cls, flags: Dict[str, Any]) -> "PageFlags":
        return cls.model_validate(dict(flags))

"""
Prompt-keyed design cache.

A design prompt is turned into a small override layer (heading and block
templates with inline colors and fonts) and persisted as one directory per
design:

    <cache_dir>/<identifier>/prompt.txt
    <cache_dir>/<identifier>/h1.html
    <cache_dir>/<identifier>/div.html

Identical prompts always map to the same identifier; a design is generated
at most once per distinct normalized prompt.
"""

import logging
import re
import shutil
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from jsonpage.errors import DesignCacheError


logger = logging.getLogger(__name__)

PROMPT_FILE = "prompt.txt"

# uuid4().hex
IDENTIFIER_PATTERN = re.compile(r"^[0-9a-f]{32}$")

STAGING_PREFIX = ".staging-"


# =============================================================================
# Style derivation
# =============================================================================

@dataclass(frozen=True)
class DesignStyle:
    """Style parameters embedded into generated templates."""
    background: str = "#ffffff"
    text: str = "#333333"
    accent: str = "#3498db"
    font: str = "sans-serif"


# Applied in order; a later matching keyword overwrites what an earlier one set.
KEYWORD_RULES: Tuple[Tuple[str, Dict[str, str]], ...] = (
    ("dark", {"background": "#2c3e50", "text": "#ecf0f1", "accent": "#e74c3c"}),
    ("moody", {"background": "#1a1a1a", "text": "#dcdcdc", "accent": "#8e44ad"}),
    ("clean", {"font": "'Helvetica Neue', Helvetica, Arial, sans-serif"}),
    ("serif", {"font": "Georgia, serif"}),
)

HEADING_TEMPLATE = (
    '<h1 style="color: {accent}; font-family: {font}; '
    'border-bottom: 2px solid {accent};">{{{{ value|text }}}}</h1>'
)

BLOCK_TEMPLATE = (
    '<div style="background: {background}; color: {text}; padding: 20px; '
    'border-radius: 8px; margin: 10px 0;">{{{{ value|text }}}}</div>'
)

GENERATED_TEMPLATES = {
    "h1.html": HEADING_TEMPLATE,
    "div.html": BLOCK_TEMPLATE,
}


def derive_style(prompt: str) -> DesignStyle:
    """Derive style parameters from keywords in a prompt (case-insensitive substring match)."""
    lowered = prompt.lower()
    style = DesignStyle()
    for keyword, overrides in KEYWORD_RULES:
        if keyword in lowered:
            style = replace(style, **overrides)
    return style


def synthesize_templates(style: DesignStyle) -> Dict[str, str]:
    """Render the override layer for a style as template name -> source."""
    params = asdict(style)
    return {name: source.format(**params) for name, source in GENERATED_TEMPLATES.items()}


# =============================================================================
# Records and locking
# =============================================================================

@dataclass(frozen=True)
class DesignRecord:
    """A persisted design."""
    identifier: str
    prompt: str
    template_files: Tuple[str, ...] = ()


class KeyedLocks:
    """
    One lock per key, created on demand and dropped when unused.

    Holders of different keys never block each other.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: Dict[str, List] = {}  # key -> [Lock, holders]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# =============================================================================
# Cache
# =============================================================================

class DesignCache:
    """
    Maps normalized prompts to persisted design identifiers.

    Lookup is a linear scan of the stored prompt files, which is fine for
    the handful of designs a site accumulates.
    """

    def __init__(
        self,
        cache_dir: Path,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.cache_dir = Path(cache_dir)
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._locks = KeyedLocks()

    @staticmethod
    def normalize_prompt(prompt: str) -> str:
        return prompt.strip()

    @staticmethod
    def is_identifier(value: str) -> bool:
        return bool(IDENTIFIER_PATTERN.match(value))

    def resolve(self, prompt: str) -> Optional[str]:
        """
        Return the design identifier for a prompt, generating it if needed.

        Args:
            prompt: Free-text design prompt, or a known design identifier

        Returns:
            The identifier, or None for an empty prompt

        Raises:
            DesignCacheError: If a new design could not be persisted
        """
        normalized = self.normalize_prompt(prompt)
        if not normalized:
            return None

        if self.is_identifier(normalized) and (self.cache_dir / normalized).is_dir():
            return normalized

        with self._locks.hold(normalized):
            existing = self.find_by_prompt(normalized)
            if existing:
                logger.debug(f"Design cache hit for prompt {normalized!r}: {existing}")
                return existing
            return self._create(normalized)

    def find_by_prompt(self, normalized: str) -> Optional[str]:
        """Scan stored records for one whose prompt equals ``normalized``."""
        for record_dir in self._record_dirs():
            try:
                stored = (record_dir / PROMPT_FILE).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            if stored.strip() == normalized:
                return record_dir.name
        return None

    def get_record(self, identifier: str) -> Optional[DesignRecord]:
        if not self.is_identifier(identifier):
            return None
        record_dir = self.cache_dir / identifier
        try:
            prompt = (record_dir / PROMPT_FILE).read_text(encoding="utf-8").strip()
            files = tuple(sorted(p.name for p in record_dir.glob("*.html")))
        except (OSError, UnicodeDecodeError):
            return None
        return DesignRecord(identifier=identifier, prompt=prompt, template_files=files)

    def list_records(self) -> List[DesignRecord]:
        records = []
        for record_dir in self._record_dirs():
            record = self.get_record(record_dir.name)
            if record is not None:
                records.append(record)
        return records

    def _record_dirs(self) -> List[Path]:
        if not self.cache_dir.is_dir():
            return []
        try:
            entries = sorted(self.cache_dir.iterdir())
        except OSError as e:
            logger.error(f"Cannot scan design cache {self.cache_dir}: {e}")
            return []
        return [p for p in entries if p.is_dir() and not p.name.startswith(".")]

    def _create(self, normalized: str) -> str:
        identifier = self._id_factory()
        style = derive_style(normalized)
        staging = self.cache_dir / f"{STAGING_PREFIX}{identifier}"
        target = self.cache_dir / identifier

        try:
            staging.mkdir(parents=True)
            (staging / PROMPT_FILE).write_text(normalized, encoding="utf-8")
            for name, source in synthesize_templates(style).items():
                (staging / name).write_text(source, encoding="utf-8")
            # Scans ignore dot-directories, so the record appears complete or not at all.
            staging.rename(target)
        except OSError as e:
            shutil.rmtree(staging, ignore_errors=True)
            logger.error(f"Failed to create design {identifier} in {self.cache_dir}: {e}")
            raise DesignCacheError(f"Could not create design for prompt: {e}") from e

        logger.info(f"Generated design {identifier} for prompt {normalized!r}")
        return identifier

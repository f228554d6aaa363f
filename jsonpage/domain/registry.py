"""
Template registry for component overrides.

A registry is an immutable snapshot of named, compiled Jinja2 templates.
Snapshots are built in layers: the default component directory first, then
an optional override layer whose names replace same-named defaults
wholesale. Nothing mutates a snapshot after construction; RegistryStore
publishes new snapshots by swapping references, so a render that captured a
snapshot sees it unchanged from start to finish.
"""

import logging
from pathlib import Path
from threading import Lock
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from jinja2 import DictLoader, Environment, Template, TemplateSyntaxError, select_autoescape

from jsonpage.domain.text import display_text


logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".html"


def _make_environment(sources: Mapping[str, str]) -> Environment:
    env = Environment(
        loader=DictLoader(dict(sources)),
        autoescape=select_autoescape(default=True, default_for_string=True),
        auto_reload=False,
    )
    env.filters["text"] = display_text
    return env


def read_layer(directory: Path) -> Dict[str, str]:
    """
    Read every ``*.html`` file in a directory as a template layer.

    A missing directory is an empty layer. An unreadable directory is logged
    and also treated as empty; unreadable files are logged and skipped.

    Returns:
        Dict mapping file name (e.g. ``card.html``) to template source
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.debug(f"Template directory {directory} does not exist")
        return {}

    try:
        paths = sorted(p for p in directory.glob(f"*{TEMPLATE_SUFFIX}") if p.is_file())
    except OSError as e:
        logger.error(f"Cannot list template directory {directory}: {e}")
        return {}

    layer: Dict[str, str] = {}
    for path in paths:
        try:
            layer[path.name] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read template {path}: {e}")
    return layer


class TemplateRegistry:
    """Immutable name -> compiled template mapping."""

    def __init__(self, sources: Optional[Mapping[str, str]] = None):
        """
        Compile a merged set of template sources.

        Templates that fail to parse are logged and left out; the rest of
        the registry is still usable.

        Args:
            sources: Dict mapping template name to Jinja2 source
        """
        sources = dict(sources or {})
        self._env = _make_environment(sources)

        compiled: Dict[str, Template] = {}
        for name in sources:
            try:
                compiled[name] = self._env.get_template(name)
            except TemplateSyntaxError as e:
                logger.warning(f"Template {name} failed to parse, skipping: {e}")

        self._sources = MappingProxyType({name: sources[name] for name in compiled})
        self._templates: Mapping[str, Template] = MappingProxyType(compiled)

    @classmethod
    def from_layers(cls, *layers: Mapping[str, str]) -> "TemplateRegistry":
        """Build a registry where each layer replaces same-named templates of the previous ones."""
        merged: Dict[str, str] = {}
        for layer in layers:
            merged.update(layer)
        return cls(merged)

    @classmethod
    def load(
        cls,
        default_dir: Path,
        override_dir: Optional[Path] = None,
    ) -> "TemplateRegistry":
        """Load the default component directory, then an optional override layer."""
        layers = [read_layer(default_dir)]
        if override_dir is not None:
            layers.append(read_layer(override_dir))
        registry = cls.from_layers(*layers)
        logger.info(
            f"Loaded {len(registry)} templates from {default_dir}"
            + (f" with overrides from {override_dir}" if override_dir else "")
        )
        return registry

    def with_layer(self, layer: Mapping[str, str]) -> "TemplateRegistry":
        """Return a new registry with ``layer`` applied on top of this one."""
        return TemplateRegistry.from_layers(self._sources, layer)

    def get(self, name: str) -> Optional[Template]:
        return self._templates.get(name)

    def source(self, name: str) -> Optional[str]:
        return self._sources.get(name)

    @property
    def names(self) -> Iterable[str]:
        return tuple(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"TemplateRegistry({sorted(self._templates)!r})"


class RegistryStore:
    """
    Process-wide holder of published registry snapshots.

    - The default snapshot comes from the component directory.
    - Design snapshots (defaults + one cached design layer) are built on
      first use and then reused.
    - Building happens outside the lock; only the reference swap is locked.
    """

    def __init__(self, components_dir: Path, cache_dir: Path):
        self.components_dir = Path(components_dir)
        self.cache_dir = Path(cache_dir)
        self._lock = Lock()
        self._default = TemplateRegistry.load(self.components_dir)
        self._designs: Mapping[str, TemplateRegistry] = MappingProxyType({})

    def current(self) -> TemplateRegistry:
        """Return the published default snapshot."""
        return self._default

    def for_design(self, design_id: Optional[str]) -> TemplateRegistry:
        """
        Return the snapshot for a design identifier.

        Args:
            design_id: Identifier of a cached design, or None for defaults

        Returns:
            Defaults with the design's templates layered on top
        """
        if not design_id:
            return self._default

        designs = self._designs
        if design_id in designs:
            return designs[design_id]

        default = self._default
        built = default.with_layer(read_layer(self.cache_dir / design_id))

        with self._lock:
            # Another request may have published meanwhile; keep the first one.
            if design_id not in self._designs and default is self._default:
                updated = dict(self._designs)
                updated[design_id] = built
                self._designs = MappingProxyType(updated)
            return self._designs.get(design_id, built)

    def reload(self) -> TemplateRegistry:
        """Rebuild the default snapshot from disk and drop design snapshots."""
        fresh = TemplateRegistry.load(self.components_dir)
        with self._lock:
            self._default = fresh
            self._designs = MappingProxyType({})
        return fresh

# template_registry.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from config import DEFAULT_TEMPLATE_NAME
from template_storage import TEMPLATE_SUFFIX


@dataclass(frozen=True)
class FacePosition:
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        for field_name in ("x", "y", "width", "height"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"FacePosition.{field_name} must be a non-negative int, got {value!r}"
                )

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) in template pixels."""
        return self.x, self.y, self.x + self.width, self.y + self.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class TemplateConfig:
    name: str
    face_position: FacePosition


DEFAULT_TEMPLATES = (
    TemplateConfig("template1", FacePosition(x=300, y=150, width=400, height=400)),
    TemplateConfig("template2", FacePosition(x=250, y=100, width=500, height=500)),
)


class TemplateRegistry:
    """
    Read-only lookup of template name -> face slot geometry.

    Built once and passed to the compositor, so tests can hand in
    synthetic templates without touching the real assets.
    """

    def __init__(self, templates: Iterable[TemplateConfig]):
        self._templates: Dict[str, TemplateConfig] = {}
        for tpl in templates:
            if tpl.name in self._templates:
                raise ValueError(f"Duplicate template name: {tpl.name}")
            self._templates[tpl.name] = tpl

    def resolve(self, name: str) -> Optional[TemplateConfig]:
        """Return the config for `name`, or None when it is not registered."""
        return self._templates.get(name)

    def names(self) -> List[str]:
        return list(self._templates)

    def list_available(self, storage) -> List[str]:
        """
        Names of templates whose backing PNG the storage can actually list.

        Best effort: a storage that cannot be enumerated yields [].
        """
        try:
            keys = storage.list_keys()
        except Exception as e:
            print(f"[templates] Could not list template assets: {e}")
            return []

        available = []
        for key in sorted(keys):
            if not key.endswith(TEMPLATE_SUFFIX):
                continue
            name = key[: -len(TEMPLATE_SUFFIX)]
            if name in self._templates:
                available.append(name)
        return available


def build_default_registry() -> TemplateRegistry:
    return TemplateRegistry(DEFAULT_TEMPLATES)

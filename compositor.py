"""
Overlay an AI-generated face onto a storybook template.

Pipeline for one call:
    1) resolve the template name in the registry (unknown name = hard error)
    2) load the template PNG from storage (missing = fallback mode)
    3) download the AI image (any failure = hard error)
    4) fallback: cover-fit the AI image to a 1024x1024 square
       composite: cover-fit it to the face slot and paste it over the template
    5) return the PNG as a data:image/png;base64 URI
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from config import DEFAULT_TEMPLATE_NAME, DOWNLOAD_TIMEOUT_SECONDS, FALLBACK_SIZE
from errors import CompositeError, ConfigurationError
from image_fetch import download_image
from image_ops import cover_fit, decode_image, encode_png, overlay_at, to_data_uri
from template_registry import TemplateConfig, TemplateRegistry, build_default_registry
from template_storage import build_template_storage, template_key

Fetch = Callable[[str], bytes]


@dataclass(frozen=True)
class CompositeResult:
    base64_image: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, data_uri: str) -> "CompositeResult":
        return cls(base64_image=data_uri)

    @classmethod
    def failure(cls, message: str) -> "CompositeResult":
        return cls(base64_image="", error=message or "Unknown error occurred")

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.base64_image)


@dataclass(frozen=True)
class TemplateLoaded:
    data: bytes


@dataclass(frozen=True)
class TemplateAbsent:
    reason: str


TemplateLoad = Union[TemplateLoaded, TemplateAbsent]


class ImageCompositor:
    def __init__(
        self,
        registry: TemplateRegistry,
        storage,
        fetch: Fetch = download_image,
        fallback_size: int = FALLBACK_SIZE,
        default_template: str = DEFAULT_TEMPLATE_NAME,
    ):
        self.registry = registry
        self.storage = storage
        self.fetch = fetch
        self.fallback_size = fallback_size
        self.default_template = default_template

    def download_image(self, url: str) -> bytes:
        return self.fetch(url)

    def load_template(self, config: TemplateConfig) -> TemplateLoad:
        """
        Read the template's PNG. Any storage failure is reclassified
        as TemplateAbsent, which switches the call to fallback mode.
        """
        key = template_key(config.name)
        try:
            return TemplateLoaded(self.storage.load(key))
        except Exception as e:
            print(
                f"[compositor] Template {key} unavailable, using AI image directly "
                f"({type(e).__name__}: {e})"
            )
            return TemplateAbsent(str(e))

    def composite_on_template(
        self,
        source_image_ref: str,
        template_name: Optional[str] = None,
    ) -> CompositeResult:
        """
        Build the final image. Never raises: every failure comes back
        as CompositeResult.failure(message).
        """
        try:
            name = template_name or self.default_template
            config = self.registry.resolve(name)
            if config is None:
                raise ConfigurationError(f"Template {name} not found")

            print(f"[compositor] Loading template: {template_key(name)}")
            template = self.load_template(config)

            source = decode_image(self.download_image(source_image_ref))

            if isinstance(template, TemplateAbsent):
                png = self._render_fallback(source)
            elif isinstance(template, TemplateLoaded):
                png = self._render_on_template(source, template, config)
            else:
                raise CompositeError(f"Unexpected template load result: {template!r}")

            print("[compositor] Image composition successful")
            return CompositeResult.success(to_data_uri(png))
        except Exception as e:
            print(f"[compositor] Image compositor error: {type(e).__name__}: {e}")
            return CompositeResult.failure(str(e))

    def _render_fallback(self, source) -> bytes:
        size = (self.fallback_size, self.fallback_size)
        return encode_png(cover_fit(source, size))

    def _render_on_template(self, source, template: TemplateLoaded, config: TemplateConfig) -> bytes:
        slot = config.face_position
        base = decode_image(template.data)

        left, top, right, bottom = slot.box
        if right > base.width or bottom > base.height:
            raise ConfigurationError(
                f"Face slot {slot.box} of template {config.name} exceeds "
                f"template bounds {base.width}x{base.height}"
            )

        face = cover_fit(source, slot.size)
        return encode_png(overlay_at(base, face, (left, top)))

    def get_available_templates(self) -> List[str]:
        return self.registry.list_available(self.storage)


def create_image_compositor(
    registry: Optional[TemplateRegistry] = None,
    storage=None,
) -> ImageCompositor:
    def fetch(url: str) -> bytes:
        return download_image(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)

    return ImageCompositor(
        registry=registry or build_default_registry(),
        storage=storage or build_template_storage(),
        fetch=fetch,
    )

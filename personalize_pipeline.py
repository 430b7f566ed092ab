# personalize_pipeline.py

from pathlib import Path
from typing import Callable, Optional, TypedDict

from compositor import ImageCompositor, create_image_compositor
from config import ALLOWED_UPLOAD_TYPES, DEFAULT_TEMPLATE_NAME, MAX_UPLOAD_BYTES
from errors import PersonalizationError
from image_ops import data_uri_to_bytes

GenerateFace = Callable[[bytes, str], str]


class PersonalizeResult(TypedDict):
    image: str
    ai_image_url: str
    template: str


def validate_upload(data: bytes, mime_type: str) -> None:
    if not data:
        raise PersonalizationError("No image file provided")

    if mime_type not in ALLOWED_UPLOAD_TYPES:
        raise PersonalizationError(
            f"Invalid file type. Allowed types: {', '.join(ALLOWED_UPLOAD_TYPES)}"
        )

    if len(data) > MAX_UPLOAD_BYTES:
        raise PersonalizationError(
            f"File too large. Maximum size: {MAX_UPLOAD_BYTES // 1024 // 1024}MB"
        )


def _default_generate(photo_bytes: bytes, mime_type: str) -> str:
    from face_ai import generate_face_from_photo

    return generate_face_from_photo(photo_bytes, mime_type)


def run_personalize_pipeline(
    photo_bytes: bytes,
    mime_type: str,
    template_name: Optional[str] = None,
    generate: Optional[GenerateFace] = None,
    compositor: Optional[ImageCompositor] = None,
) -> PersonalizeResult:
    """
    Upload -> cartoon face (fal) -> composited template image.

    Returns:
        dict with the data URI, the intermediate AI image URL and the
        template used. Raises PersonalizationError on any failed step.
    """
    validate_upload(photo_bytes, mime_type)
    generate = generate or _default_generate
    template = template_name or DEFAULT_TEMPLATE_NAME

    print(f"[pipeline] Processing upload ({len(photo_bytes)} bytes, {mime_type})")

    # 1) Personalized illustration from the hosted model
    print("[pipeline] Step 1: Generating personalized illustration with AI...")
    try:
        ai_image_url = generate(photo_bytes, mime_type)
    except PersonalizationError:
        raise
    except Exception as e:
        raise PersonalizationError(f"Failed to generate personalized image: {e}") from e

    # 2) Face onto template
    print("[pipeline] Step 2: Compositing onto template...")
    compositor = compositor or create_image_compositor()
    result = compositor.composite_on_template(ai_image_url, template)

    if not result.ok:
        raise PersonalizationError(result.error or "Failed to composite image")

    print("[pipeline] Personalization completed successfully")
    return {
        "image": result.base64_image,
        "ai_image_url": ai_image_url,
        "template": template,
    }


def save_data_uri(data_uri: str, out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data_uri_to_bytes(data_uri))
    return out_path

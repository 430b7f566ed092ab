from typing import Any, Optional

from config import FAL_FACE_MODEL_ID, FAL_KEY
from errors import PersonalizationError

try:
    from fal_client import SyncClient
except ImportError as e:
    raise ImportError("Missing dependency. Run: pip install fal-client") from e


DEFAULT_PROMPT = (
    "cute cartoon style, colorful, friendly, childrens book illustration, happy child"
)
NEGATIVE_PROMPT = "ugly, blurry, poor quality"

_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise RuntimeError(f"Missing {name}. Check your .env and config.py.")
    return value


def _extract_image_url(payload: Any) -> str:
    """
    Common fal response shapes:
      {"images": [{"url": "..."}]}
      {"image": {"url": "..."}}
      {"sticker_image": {"url": "..."}}
    """
    if isinstance(payload, dict):
        imgs = payload.get("images")
        if isinstance(imgs, list) and imgs:
            first = imgs[0]
            if isinstance(first, dict) and isinstance(first.get("url"), str):
                return first["url"]
            if isinstance(first, str) and first.startswith("http"):
                return first
        for key in ("image", "sticker_image"):
            v = payload.get(key)
            if isinstance(v, dict) and isinstance(v.get("url"), str):
                return v["url"]
        if isinstance(payload.get("url"), str) and payload["url"].startswith("http"):
            return payload["url"]

    if isinstance(payload, str) and payload.startswith("http"):
        return payload

    raise PersonalizationError(f"No output received from AI model: {payload}")


def _build_client() -> SyncClient:
    return SyncClient(key=_require(FAL_KEY, "FAL_KEY"))


def generate_face_from_photo(
    photo_bytes: bytes,
    mime_type: str = "image/jpeg",
    prompt: Optional[str] = None,
    client: Optional[SyncClient] = None,
) -> str:
    """
    Turn the uploaded photo into a cartoon face with the fal face-to-sticker
    model. Returns the URL of the generated image (hosted by fal).
    """
    model_id = _require(FAL_FACE_MODEL_ID, "FAL_FACE_MODEL_ID")
    client = client or _build_client()

    ext = _MIME_EXTENSIONS.get(mime_type, "jpg")
    # fal needs a URL it can reach, so push the raw upload first
    image_url = client.upload(photo_bytes, mime_type, file_name=f"upload.{ext}")

    print("[face_ai] Calling fal for image personalization...")
    result = client.subscribe(
        model_id,
        {
            "image_url": image_url,
            "prompt": prompt or DEFAULT_PROMPT,
            "negative_prompt": NEGATIVE_PROMPT,
            "image_size": {"width": 1024, "height": 1024},
            "num_inference_steps": 20,
            "guidance_scale": 4.5,
            "instant_id_strength": 0.7,
            "ip_adapter_weight": 0.2,
            "ip_adapter_noise": 0.5,
            "upscale": False,
            "upscale_steps": 10,
        },
        with_logs=False,
    )

    data = result.get("data", result) if isinstance(result, dict) else result
    url = _extract_image_url(data)

    print(f"[face_ai] AI personalization successful: {url}")
    return url


def check_connection(client: Optional[SyncClient] = None) -> bool:
    """
    True when fal accepts our key: pushes a tiny file through the
    authenticated upload endpoint.
    """
    try:
        client = client or _build_client()
        client.upload(b"ping", "text/plain", file_name="ping.txt")
    except Exception as e:
        print(f"[face_ai] Failed to connect to fal: {e}")
        return False
    print("[face_ai] Connected to fal")
    return True

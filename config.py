"""
Global configuration for the storybook face compositor.

Loads secrets from .env (FAL_KEY, FIREBASE_STORAGE_BUCKET, ...),
and defines paths used across the app.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Empty values in .env count as unset, hence `getenv(...) or default` below.
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
MEDIA_DIR = Path(os.getenv("MEDIA_DIR") or str(BASE_DIR / "media"))
MEDIA_DIR.mkdir(parents=True, exist_ok=True)


# ----------------------------
# Templates
# ----------------------------
# Template PNGs live under ./assets/templates/<name>.png by default.

TEMPLATES_DIR = Path(
    os.getenv("TEMPLATES_DIR") or str(BASE_DIR / "assets" / "templates")
)

# "local" reads TEMPLATES_DIR, "firebase" reads the storage bucket.
TEMPLATE_STORAGE = (os.getenv("TEMPLATE_STORAGE") or "local").lower()

DEFAULT_TEMPLATE_NAME = os.getenv("DEFAULT_TEMPLATE_NAME") or "template1"

# Canonical square used when no template asset is available.
FALLBACK_SIZE = int(os.getenv("FALLBACK_SIZE") or "1024")


# ----------------------------
# Firebase storage
# ----------------------------

SERVICE_ACCOUNT_PATH = Path(
    os.getenv("SERVICE_ACCOUNT_PATH") or str(BASE_DIR / "firebase-key.json")
)
FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET") or None
FIREBASE_TEMPLATES_PREFIX = os.getenv("FIREBASE_TEMPLATES_PREFIX") or "templates"


# ----------------------------
# Face generation (fal)
# ----------------------------

FAL_KEY = os.getenv("FAL_KEY") or None
FAL_FACE_MODEL_ID = os.getenv("FAL_FACE_MODEL_ID") or "fal-ai/face-to-sticker"


# ----------------------------
# Network / uploads
# ----------------------------

# Unset means no client-side timeout on the source image download.
_timeout = os.getenv("DOWNLOAD_TIMEOUT_SECONDS")
DOWNLOAD_TIMEOUT_SECONDS = float(_timeout) if _timeout else None

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES") or 10 * 1024 * 1024)
ALLOWED_UPLOAD_TYPES = ("image/jpeg", "image/png", "image/jpg", "image/webp")

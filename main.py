# main.py
import argparse
import sys
import uuid
from pathlib import Path

from compositor import create_image_compositor
from config import MEDIA_DIR
from errors import PersonalizationError
from personalize_pipeline import run_personalize_pipeline, save_data_uri


def _guess_mime_type(path: Path) -> str:
    ext = path.suffix.lower()
    if ext in [".jpg", ".jpeg"]:
        return "image/jpeg"
    if ext == ".png":
        return "image/png"
    if ext == ".webp":
        return "image/webp"
    return "application/octet-stream"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Storybook face personalizer")
    parser.add_argument("photo", nargs="?", help="Path to the photo to personalize")
    parser.add_argument("--template", help="Template name (default: template1)")
    parser.add_argument("--output", help="Where to write the final PNG")
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="Print the registered templates, marking ones without an asset, and exit",
    )
    parser.add_argument(
        "--check-connection",
        action="store_true",
        help="Check that the fal model host accepts FAL_KEY and exit",
    )
    args = parser.parse_args(argv)

    if args.check_connection:
        from face_ai import check_connection

        return 0 if check_connection() else 1

    try:
        compositor = create_image_compositor()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if args.list_templates:
        available = set(compositor.get_available_templates())
        for name in compositor.registry.names():
            print(name if name in available else f"{name} (no asset, fallback only)")
        return 0

    if not args.photo:
        parser.error("photo is required unless --list-templates is given")

    photo_path = Path(args.photo)
    if not photo_path.exists():
        print(f"Error: Input file '{photo_path}' not found.")
        return 1

    try:
        result = run_personalize_pipeline(
            photo_bytes=photo_path.read_bytes(),
            mime_type=_guess_mime_type(photo_path),
            template_name=args.template,
            compositor=compositor,
        )
    except PersonalizationError as e:
        print(f"Error: {e}")
        return 1

    out_path = Path(args.output) if args.output else MEDIA_DIR / f"personalized_{uuid.uuid4().hex}.png"
    save_data_uri(result["image"], out_path)
    print(f"Saved personalized image to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

from typing import Optional

import requests

from errors import DownloadError


def download_image(url: str, timeout: Optional[float] = None) -> bytes:
    """
    Download the AI-generated image at `url` and return its raw bytes.

    One GET, no retries. Transport errors and non-2xx responses are
    raised as DownloadError with the underlying detail.
    """
    print(f"[image_fetch] Downloading AI-generated image from: {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        resp = e.response
        if resp is not None and resp.reason:
            detail = f"{resp.status_code} {resp.reason}"
        else:
            detail = str(e)
        raise DownloadError(f"Failed to download image: {detail}") from e
    except requests.RequestException as e:
        raise DownloadError(f"Failed to download image: {e}") from e

    return response.content

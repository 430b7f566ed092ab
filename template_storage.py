from pathlib import Path
from typing import List, Optional

from config import (
    FIREBASE_STORAGE_BUCKET,
    FIREBASE_TEMPLATES_PREFIX,
    SERVICE_ACCOUNT_PATH,
    TEMPLATE_STORAGE,
    TEMPLATES_DIR,
)

TEMPLATE_SUFFIX = ".png"


def template_key(name: str) -> str:
    """Storage key of a template's backing image, e.g. 'template1.png'."""
    return f"{name}{TEMPLATE_SUFFIX}"


class LocalTemplateStorage:
    """
    Template PNGs in a local directory (assets/templates by default).
    """

    def __init__(self, root_dir: Path = TEMPLATES_DIR):
        self.root_dir = Path(root_dir)

    def path_for(self, key: str) -> Path:
        return self.root_dir / key

    def load(self, key: str) -> bytes:
        """Read the full asset. Raises FileNotFoundError / OSError."""
        return self.path_for(key).read_bytes()

    def list_keys(self) -> List[str]:
        return sorted(p.name for p in self.root_dir.iterdir() if p.is_file())


class FirebaseTemplateStorage:
    """
    Template PNGs stored as blobs under gs://<bucket>/<prefix>/.
    The Firebase app is initialised on first use.
    """

    def __init__(self, prefix: str = FIREBASE_TEMPLATES_PREFIX, bucket=None):
        self.prefix = prefix.strip("/")
        self._bucket = bucket

    @property
    def bucket(self):
        if self._bucket is None:
            import firebase_admin
            from firebase_admin import credentials
            from firebase_admin import storage as fb_storage

            if not firebase_admin._apps:
                cred = credentials.Certificate(str(SERVICE_ACCOUNT_PATH))
                firebase_admin.initialize_app(
                    cred, {"storageBucket": FIREBASE_STORAGE_BUCKET}
                )
            self._bucket = fb_storage.bucket()
        return self._bucket

    def blob_path(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def load(self, key: str) -> bytes:
        blob = self.bucket.blob(self.blob_path(key))
        if not blob.exists():
            raise FileNotFoundError(f"Template blob not found: {self.blob_path(key)}")
        return blob.download_as_bytes()

    def list_keys(self) -> List[str]:
        prefix = f"{self.prefix}/" if self.prefix else ""
        keys = []
        for blob in self.bucket.list_blobs(prefix=prefix):
            name = blob.name[len(prefix):]
            if name and "/" not in name:
                keys.append(name)
        return sorted(keys)


def build_template_storage(kind: Optional[str] = None):
    kind = (kind or TEMPLATE_STORAGE).lower()
    if kind == "local":
        return LocalTemplateStorage()
    if kind == "firebase":
        return FirebaseTemplateStorage()
    raise ValueError(f"Unknown TEMPLATE_STORAGE: {kind}")

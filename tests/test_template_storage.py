import pytest

from template_storage import (
    FirebaseTemplateStorage,
    LocalTemplateStorage,
    build_template_storage,
    template_key,
)


def test_template_key():
    assert template_key("template1") == "template1.png"


def test_local_storage_load_and_list(storage, template_dir):
    assert storage.load("template1.png") == (template_dir / "template1.png").read_bytes()
    assert storage.list_keys() == ["template1.png"]


def test_local_storage_missing_raises(storage):
    with pytest.raises(FileNotFoundError):
        storage.load("template2.png")


def test_local_storage_missing_dir_raises_on_list(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalTemplateStorage(tmp_path / "nope").list_keys()


class FakeBlob:
    def __init__(self, name, data=None):
        self.name = name
        self.data = data

    def exists(self):
        return self.data is not None

    def download_as_bytes(self):
        return self.data


class FakeBucket:
    def __init__(self, blobs):
        self.blobs = blobs

    def blob(self, path):
        return FakeBlob(path, self.blobs.get(path))

    def list_blobs(self, prefix=""):
        return [FakeBlob(k, v) for k, v in self.blobs.items() if k.startswith(prefix)]


def test_firebase_storage_reads_under_prefix():
    bucket = FakeBucket({
        "templates/template1.png": b"png",
        "templates/old/template2.png": b"png",
        "other/template3.png": b"png",
    })
    store = FirebaseTemplateStorage(prefix="templates/", bucket=bucket)

    assert store.load("template1.png") == b"png"
    assert store.list_keys() == ["template1.png"]
    with pytest.raises(FileNotFoundError):
        store.load("template2.png")


def test_build_template_storage():
    assert isinstance(build_template_storage("local"), LocalTemplateStorage)
    assert isinstance(build_template_storage("firebase"), FirebaseTemplateStorage)
    with pytest.raises(ValueError):
        build_template_storage("s3")

from io import BytesIO

import pytest
from PIL import Image

from template_registry import FacePosition, TemplateConfig, TemplateRegistry
from template_storage import LocalTemplateStorage

TEMPLATE_COLOR = (10, 20, 30, 255)
FACE_COLOR = (250, 0, 0, 255)


def png_bytes(size, color, mode="RGBA", fmt="PNG") -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def registry():
    return TemplateRegistry(
        [
            TemplateConfig("template1", FacePosition(x=300, y=150, width=400, height=400)),
            TemplateConfig("template2", FacePosition(x=250, y=100, width=500, height=500)),
        ]
    )


@pytest.fixture
def template_dir(tmp_path):
    # only template1 has an asset on disk
    d = tmp_path / "templates"
    d.mkdir()
    (d / "template1.png").write_bytes(png_bytes((1024, 1024), TEMPLATE_COLOR))
    return d


@pytest.fixture
def storage(template_dir):
    return LocalTemplateStorage(template_dir)


class FakeFetch:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def face_fetch():
    return FakeFetch(png_bytes((800, 600), FACE_COLOR))

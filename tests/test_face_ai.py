import pytest

import face_ai
from errors import PersonalizationError


class StubFalClient:
    def __init__(self, result):
        self.result = result
        self.uploads = []
        self.calls = []

    def upload(self, data, content_type, file_name=None):
        self.uploads.append((data, content_type, file_name))
        return "https://fal.media/uploads/upload.png"

    def subscribe(self, application, arguments, with_logs=False):
        self.calls.append((application, arguments))
        return self.result


def test_generate_face_uploads_and_returns_url():
    client = StubFalClient({"images": [{"url": "https://fal.media/out/face.png"}]})

    url = face_ai.generate_face_from_photo(b"photo", "image/png", client=client)

    assert url == "https://fal.media/out/face.png"
    assert client.uploads == [(b"photo", "image/png", "upload.png")]
    model, args = client.calls[0]
    assert model == face_ai.FAL_FACE_MODEL_ID
    assert args["image_url"] == "https://fal.media/uploads/upload.png"
    assert args["prompt"] == face_ai.DEFAULT_PROMPT
    assert args["image_size"] == {"width": 1024, "height": 1024}


def test_generate_face_custom_prompt():
    client = StubFalClient({"image": {"url": "https://fal.media/out/face.png"}})

    face_ai.generate_face_from_photo(b"photo", "image/jpeg", prompt="watercolor", client=client)

    assert client.calls[0][1]["prompt"] == "watercolor"


@pytest.mark.parametrize("payload, expected", [
    ({"images": [{"url": "https://a/1.png"}]}, "https://a/1.png"),
    ({"images": ["https://a/2.png"]}, "https://a/2.png"),
    ({"sticker_image": {"url": "https://a/3.png"}}, "https://a/3.png"),
    ({"data": {"image": {"url": "https://a/4.png"}}}, "https://a/4.png"),
    ("https://a/5.png", "https://a/5.png"),
])
def test_response_shapes(payload, expected):
    client = StubFalClient(payload)

    assert face_ai.generate_face_from_photo(b"x", "image/png", client=client) == expected


def test_empty_output_raises():
    client = StubFalClient({"images": []})

    with pytest.raises(PersonalizationError, match="No output received"):
        face_ai.generate_face_from_photo(b"x", "image/png", client=client)


def test_missing_fal_key(monkeypatch):
    monkeypatch.setattr(face_ai, "FAL_KEY", None)

    with pytest.raises(RuntimeError, match="FAL_KEY"):
        face_ai.generate_face_from_photo(b"x", "image/png")


def test_check_connection_ok():
    client = StubFalClient({})

    assert face_ai.check_connection(client=client) is True
    assert client.uploads == [(b"ping", "text/plain", "ping.txt")]


def test_check_connection_failure(capsys):
    class OfflineClient(StubFalClient):
        def upload(self, data, content_type, file_name=None):
            raise ConnectionError("fal unreachable")

    assert face_ai.check_connection(client=OfflineClient({})) is False
    assert "fal unreachable" in capsys.readouterr().out


def test_check_connection_without_key(monkeypatch):
    monkeypatch.setattr(face_ai, "FAL_KEY", None)

    assert face_ai.check_connection() is False

import io
import json

import pytest
import requests

from valuegen import utils
from valuegen.utils import DescriptorLoadError, load_descriptors, write_source


class FakeResponse:
    def __init__(self, payload=None, status=200, body_error=None):
        self.payload = payload
        self.status_code = status
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self.body_error:
            raise self.body_error
        return self.payload


def test_load_from_file(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps({"targets": []}))
    source, data = load_descriptors(file_path=path)
    assert source == str(path)
    assert data == {"targets": []}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_descriptors(file_path=tmp_path / "absent.json")


def test_invalid_json_file(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text("{not json")
    with pytest.raises(DescriptorLoadError, match="Invalid JSON"):
        load_descriptors(file_path=path)


def test_load_from_stream():
    source, data = load_descriptors(file_path="-", stream=io.StringIO("[1]"))
    assert source == "<stdin>"
    assert data == [1]

    with pytest.raises(DescriptorLoadError):
        load_descriptors(file_path="-", stream=io.StringIO(""))


def test_source_selection():
    with pytest.raises(DescriptorLoadError, match="must be provided"):
        load_descriptors()
    with pytest.raises(DescriptorLoadError, match="both"):
        load_descriptors(file_path="a.json", url="http://example.com/a.json")


def test_load_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse([{"name": "Foo"}])

    monkeypatch.setattr(utils.requests, "get", fake_get)
    source, data = load_descriptors(url="https://example.com/targets.json", timeout=5)
    assert source == "https://example.com/targets.json"
    assert data == [{"name": "Foo"}]
    assert calls == [("https://example.com/targets.json", 5)]


@pytest.mark.parametrize(
    "response, message",
    [
        (FakeResponse(status=404), "HTTP error 404"),
        (FakeResponse(body_error=ValueError("bad body")), "Invalid JSON response"),
    ],
)
def test_url_failures(monkeypatch, response, message):
    monkeypatch.setattr(utils.requests, "get", lambda url, timeout: response)
    with pytest.raises(DescriptorLoadError, match=message):
        load_descriptors(url="https://example.com/targets.json")


def test_url_timeout(monkeypatch):
    def fake_get(url, timeout):
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(utils.requests, "get", fake_get)
    with pytest.raises(DescriptorLoadError, match="timeout"):
        load_descriptors(url="https://example.com/targets.json")


def test_invalid_url():
    with pytest.raises(DescriptorLoadError, match="Invalid URL"):
        load_descriptors(url="not-a-url")


def test_write_source(tmp_path):
    path = write_source(tmp_path, "com/example/FooBuilder.java", "class FooBuilder {}\n")
    assert path == tmp_path / "com" / "example" / "FooBuilder.java"
    assert path.read_text() == "class FooBuilder {}\n"

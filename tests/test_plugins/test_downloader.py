"""Tests for streaming downloads to disk."""

import httpx
import pytest

from telectl.errors import CreateFailed, FetchFailed, WriteFailed
from telectl.plugins.downloader import download, filename_from_url

URL = "https://github.com/acme/snap-plugin-collector-cpu/releases/download/2/snap-plugin-collector-cpu_linux_x86_64"


class BrokenStream(httpx.SyncByteStream):
    def __iter__(self):
        yield b"partial"
        raise httpx.ReadError("connection reset")


class TestFilenameFromUrl:
    def test_last_segment(self):
        assert filename_from_url(URL) == "snap-plugin-collector-cpu_linux_x86_64"

    def test_ignores_query(self):
        assert filename_from_url("http://host/a/plugin.bin?token=x") == "plugin.bin"

    def test_trailing_slash(self):
        assert filename_from_url("http://host/a/plugin/") == "plugin"


class TestDownload:
    def test_writes_file_and_reports_size(self, mock_http, tmp_path):
        mock_http.respond(lambda request: httpx.Response(200, content=b"\x7fELF" + b"0" * 100))
        target = tmp_path / "plugin"

        result = download(URL, filename=str(target))

        assert result.path == target
        assert result.size == 104
        assert target.read_bytes().startswith(b"\x7fELF")

    def test_derives_name_from_url(self, mock_http, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mock_http.respond(lambda request: httpx.Response(200, content=b"abc"))

        result = download(URL)

        assert result.path.name == "snap-plugin-collector-cpu_linux_x86_64"
        assert (tmp_path / "snap-plugin-collector-cpu_linux_x86_64").read_bytes() == b"abc"

    def test_follows_redirects(self, mock_http, tmp_path):
        def handler(request):
            if request.url.host == "github.com":
                return httpx.Response(302, headers={"Location": "https://objects.example.com/blob"})
            return httpx.Response(200, content=b"blob")

        mock_http.respond(handler)
        result = download(URL, filename=str(tmp_path / "out"))
        assert result.size == 4

    def test_existing_file_is_truncated(self, mock_http, tmp_path):
        target = tmp_path / "plugin"
        target.write_bytes(b"old contents that are longer")
        mock_http.respond(lambda request: httpx.Response(200, content=b"new"))

        download(URL, filename=str(target))

        assert target.read_bytes() == b"new"

    def test_no_clobber_refuses_existing_file(self, mock_http, tmp_path):
        target = tmp_path / "plugin"
        target.write_bytes(b"keep")

        with pytest.raises(CreateFailed):
            download(URL, filename=str(target), no_clobber=True)

        assert target.read_bytes() == b"keep"
        assert mock_http.requests == []

    def test_create_failed(self, mock_http, tmp_path):
        with pytest.raises(CreateFailed) as exc_info:
            download(URL, filename=str(tmp_path / "missing-dir" / "plugin"))
        assert "missing-dir" in exc_info.value.path
        assert mock_http.requests == []

    def test_fetch_failed_on_status(self, mock_http, tmp_path):
        mock_http.respond(lambda request: httpx.Response(404))
        with pytest.raises(FetchFailed) as exc_info:
            download(URL, filename=str(tmp_path / "plugin"))
        assert exc_info.value.url == URL

    def test_fetch_failed_on_connection_error(self, mock_http, tmp_path):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        mock_http.respond(refuse)
        with pytest.raises(FetchFailed, match="connection refused"):
            download(URL, filename=str(tmp_path / "plugin"))

    def test_write_failed_leaves_partial_file(self, mock_http, tmp_path):
        mock_http.respond(lambda request: httpx.Response(200, stream=BrokenStream()))
        target = tmp_path / "plugin"

        with pytest.raises(WriteFailed):
            download(URL, filename=str(target))

        assert target.exists()

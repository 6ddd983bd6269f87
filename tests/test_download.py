"""Tests for downloading signed files."""

import io
import os

import httpx
import pytest

from sign_addon.download import DownloadProgress, FileDownloader
from sign_addon.errors import DownloadError, NoSignedFilesError
from sign_addon.types import FileDescriptor


def signed(url):
    return FileDescriptor(signed=True, download_url=url)


def unsigned(url):
    return FileDescriptor(signed=False, download_url=url)


class FileServer:
    """Serves file bodies by URL and records which ones were requested."""

    def __init__(self, files=None, status_code=200):
        self.files = files or {}
        self.status_code = status_code
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        body = self.files.get(str(request.url), b"signed-bytes")
        return httpx.Response(self.status_code, content=body)


class TestFetchAll:
    @pytest.mark.asyncio
    async def test_downloads_signed_files(self, make_gateway, tmp_path):
        server = FileServer({"http://amo/some-signed-file-1.2.3.xpi": b"xpi-contents"})
        downloader = FileDownloader(make_gateway(server), str(tmp_path), stdout=io.StringIO())

        result = await downloader.fetch_all([signed("http://amo/some-signed-file-1.2.3.xpi")])

        file_path = os.path.join(str(tmp_path), "some-signed-file-1.2.3.xpi")
        assert result.success is True
        assert result.downloaded_file_paths == [file_path]
        with open(file_path, "rb") as f:
            assert f.read() == b"xpi-contents"
        assert str(server.requests[0].url) == "http://amo/some-signed-file-1.2.3.xpi"

    @pytest.mark.asyncio
    async def test_allows_partially_signed_files(self, make_gateway, tmp_path):
        """Test that unsigned entries are skipped and the rest downloaded."""
        server = FileServer()
        downloader = FileDownloader(make_gateway(server), str(tmp_path), stdout=io.StringIO())
        files = [
            signed("http://amo/first.xpi"),
            unsigned("http://nope.org/should-not-be-downloaded.xpi"),
            signed("http://amo/second.xpi"),
        ]

        result = await downloader.fetch_all(files)

        assert result.success is True
        assert sorted(result.downloaded_file_paths) == sorted(
            [os.path.join(str(tmp_path), "first.xpi"), os.path.join(str(tmp_path), "second.xpi")]
        )
        assert len(server.requests) == 2
        assert "should-not-be-downloaded" not in " ".join(str(r.url) for r in server.requests)

    @pytest.mark.asyncio
    async def test_fails_for_unsigned_files(self, make_gateway, tmp_path):
        server = FileServer()
        downloader = FileDownloader(make_gateway(server), str(tmp_path), stdout=io.StringIO())
        files = [unsigned("http://amo/a.xpi"), unsigned("http://amo/b.xpi")]

        with pytest.raises(NoSignedFilesError, match="no signed files were found"):
            await downloader.fetch_all(files)

        assert server.requests == []

    @pytest.mark.asyncio
    async def test_fails_for_empty_file_list(self, make_gateway, tmp_path):
        downloader = FileDownloader(make_gateway(FileServer()), str(tmp_path), stdout=io.StringIO())

        with pytest.raises(NoSignedFilesError):
            await downloader.fetch_all([])

    @pytest.mark.asyncio
    async def test_fails_for_404_signed_file_downloads(self, make_gateway, tmp_path):
        server = FileServer(status_code=404)
        downloader = FileDownloader(make_gateway(server), str(tmp_path), stdout=io.StringIO())
        url = "http://amo/some-signed-file-1.2.3.xpi"

        with pytest.raises(DownloadError) as excinfo:
            await downloader.fetch_all([signed(url)])

        assert "Got a 404 response when downloading" in str(excinfo.value)
        assert url in str(excinfo.value)
        assert excinfo.value.status_code == 404

    @pytest.mark.asyncio
    async def test_one_failure_fails_the_batch(self, make_gateway, tmp_path):
        def handler(request):
            if request.url.path == "/broken.xpi":
                return httpx.Response(500)
            return httpx.Response(200, content=b"ok")

        downloader = FileDownloader(make_gateway(handler), str(tmp_path), stdout=io.StringIO())

        with pytest.raises(DownloadError):
            await downloader.fetch_all([signed("http://amo/fine.xpi"), signed("http://amo/broken.xpi")])

    @pytest.mark.asyncio
    async def test_handles_download_errors(self, make_gateway, tmp_path):
        def handler(request):
            raise httpx.ReadError("some download error", request=request)

        downloader = FileDownloader(make_gateway(handler), str(tmp_path), stdout=io.StringIO())

        with pytest.raises(httpx.ReadError, match="some download error"):
            await downloader.fetch_all([signed("http://amo/file.xpi")])

    @pytest.mark.asyncio
    async def test_names_files_without_query_string(self, make_gateway, tmp_path):
        downloader = FileDownloader(make_gateway(FileServer()), str(tmp_path), stdout=io.StringIO())

        result = await downloader.fetch_all([signed("http://amo/addon-1.0.xpi?src=api")])

        assert result.downloaded_file_paths == [os.path.join(str(tmp_path), "addon-1.0.xpi")]
        assert (tmp_path / "addon-1.0.xpi").exists()

    @pytest.mark.asyncio
    async def test_follows_redirects(self, make_gateway, tmp_path):
        def handler(request):
            if request.url.host == "amo":
                return httpx.Response(302, headers={"location": "http://cdn/real-file.xpi"})
            return httpx.Response(200, content=b"from-cdn")

        downloader = FileDownloader(make_gateway(handler), str(tmp_path), stdout=io.StringIO())

        result = await downloader.fetch_all([signed("http://amo/addon.xpi")])

        assert result.downloaded_file_paths == [os.path.join(str(tmp_path), "addon.xpi")]
        assert (tmp_path / "addon.xpi").read_bytes() == b"from-cdn"

    @pytest.mark.asyncio
    async def test_sends_auth_headers(self, make_gateway, tmp_path):
        server = FileServer()
        downloader = FileDownloader(make_gateway(server), str(tmp_path), stdout=io.StringIO())

        await downloader.fetch_all([signed("http://amo/file.xpi")])

        assert server.requests[0].headers["authorization"].startswith("JWT ")

    @pytest.mark.asyncio
    async def test_reports_progress(self, make_gateway, tmp_path):
        stdout = io.StringIO()
        downloader = FileDownloader(make_gateway(FileServer()), str(tmp_path), stdout=stdout)

        await downloader.fetch_all([signed("http://amo/a.xpi"), signed("http://amo/b.xpi")])

        output = stdout.getvalue()
        assert "Downloading signed files:" in output
        assert "100% " in output
        assert output.endswith("\n")


class TestDownloadProgress:
    def test_sums_content_lengths(self):
        progress = DownloadProgress(io.StringIO())

        progress.expect("100")
        progress.expect("300")

        assert progress.expected == 400

    def test_percentage_is_padded(self):
        stdout = io.StringIO()
        progress = DownloadProgress(stdout)
        progress.expect("200")

        progress.advance(50)

        assert stdout.getvalue() == "\rDownloading signed files:  25% "

    def test_indeterminate_without_content_length(self):
        stdout = io.StringIO()
        progress = DownloadProgress(stdout)
        progress.expect(None)
        progress.expect("not-a-number")

        progress.advance(10)

        assert progress.expected is None
        assert stdout.getvalue() == "\rDownloading signed files: ..."

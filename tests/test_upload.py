"""Tests for the picture storage backends."""

import os
from unittest.mock import MagicMock, patch

import pytest
import requests
from botocore.exceptions import ClientError

from app.lib.upload import CloudflareStorage, LocalStorage, create_storage


def _response(content=b"\x89PNG", content_type="image/png"):
    response = MagicMock()
    response.content = content
    response.headers = {"Content-Type": content_type}
    return response


class TestLocalStorage:
    def test_stores_local_file(self, tmp_path):
        source = tmp_path / "avatar.png"
        source.write_bytes(b"\x89PNG")
        storage = LocalStorage(str(tmp_path / "uploads"), "http://frontend.test/")

        url = storage.upload_simple(str(source))

        assert url.startswith("http://frontend.test/uploads/")
        assert url.endswith(".png")
        relative = url[len("http://frontend.test/uploads/"):]
        stored = tmp_path / "uploads" / relative
        assert stored.read_bytes() == b"\x89PNG"

    def test_downloads_remote_picture(self, tmp_path):
        storage = LocalStorage(str(tmp_path), "http://frontend.test")

        with patch("app.lib.upload.requests.get") as get:
            get.return_value = _response(content_type="image/png; charset=binary")
            url = storage.upload_simple("https://graph.example.com/picture")

        get.assert_called_once()
        assert get.call_args.args[0] == "https://graph.example.com/picture"
        assert url.endswith(".png")
        file_name = url.rsplit("/", 1)[1]
        assert len(os.path.splitext(file_name)[0]) == 32

    def test_missing_file_raises(self, tmp_path):
        storage = LocalStorage(str(tmp_path), "http://frontend.test")
        with pytest.raises(FileNotFoundError):
            storage.upload_simple(str(tmp_path / "nope.png"))

    def test_http_error_propagates(self, tmp_path):
        storage = LocalStorage(str(tmp_path), "http://frontend.test")

        with patch("app.lib.upload.requests.get") as get:
            response = _response()
            response.raise_for_status.side_effect = requests.HTTPError("404")
            get.return_value = response
            with pytest.raises(requests.HTTPError):
                storage.upload_simple("https://graph.example.com/picture")

        assert os.listdir(tmp_path) == []


class TestCloudflareStorage:
    @pytest.fixture
    def client(self):
        with patch("app.lib.upload.boto3.client") as factory:
            yield factory

    def _storage(self):
        return CloudflareStorage(
            account_id="acc",
            access_key="key",
            secret_access_key="secret",
            bucket_name="bucket",
            bucket_url="https://cdn.test/",
        )

    def test_client_uses_r2_endpoint(self, client):
        self._storage()
        kwargs = client.call_args.kwargs
        assert client.call_args.args == ("s3",)
        assert kwargs["endpoint_url"] == "https://acc.r2.cloudflarestorage.com"
        assert kwargs["region_name"] == "auto"

    def test_puts_object_and_returns_bucket_url(self, client):
        storage = self._storage()

        with patch("app.lib.upload.requests.get", return_value=_response()):
            url = storage.upload_simple("https://graph.example.com/picture")

        put = client.return_value.put_object
        put.assert_called_once()
        kwargs = put.call_args.kwargs
        assert kwargs["Bucket"] == "bucket"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Body"] == b"\x89PNG"
        assert url == f"https://cdn.test/{kwargs['Key']}"

    def test_client_error_propagates(self, client):
        storage = self._storage()
        client.return_value.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with patch("app.lib.upload.requests.get", return_value=_response()):
            with pytest.raises(ClientError):
                storage.upload_simple("https://graph.example.com/picture")


class TestCreateStorage:
    def test_local(self, tmp_path):
        storage = create_storage(
            {
                "STORAGE_PROVIDER": "local",
                "UPLOAD_DIRECTORY": str(tmp_path),
                "FRONTEND_URL": "http://frontend.test",
            }
        )
        assert isinstance(storage, LocalStorage)

    def test_cloudflare(self):
        config = {
            "STORAGE_PROVIDER": "cloudflare",
            "CLOUDFLARE_ACCOUNT_ID": "acc",
            "CLOUDFLARE_ACCESS_KEY": "key",
            "CLOUDFLARE_SECRET_ACCESS_KEY": "secret",
            "CLOUDFLARE_BUCKETNAME": "bucket",
            "CLOUDFLARE_BUCKET_URL": "https://cdn.test",
        }
        with patch("app.lib.upload.boto3.client"):
            assert isinstance(create_storage(config), CloudflareStorage)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_storage({"STORAGE_PROVIDER": "ftp"})

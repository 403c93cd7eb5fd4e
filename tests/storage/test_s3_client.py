"""Tests for S3StorageClient."""

import io
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from results_resource.errors import ObjectNotFoundError, StorageUnavailableError
from results_resource.storage.s3_client import MAX_RETRIES, S3StorageClient


@pytest.fixture
def mock_boto3():
    with patch("results_resource.storage.s3_client.boto3") as m:
        m.client.return_value = MagicMock()
        yield m


@pytest.fixture
def client(mock_boto3) -> S3StorageClient:
    return S3StorageClient(bucket_name="test-bucket", path_prefix="nested/")


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


class TestClientConfiguration:
    def test_defaults(self, mock_boto3):
        S3StorageClient(bucket_name="b")
        kwargs = mock_boto3.client.call_args.kwargs
        config = kwargs["config"]
        assert config.region_name == "us-east-1"
        assert config.signature_version == "s3v4"
        assert config.retries["max_attempts"] == MAX_RETRIES
        assert config.s3["addressing_style"] == "path"
        assert "endpoint_url" not in kwargs
        assert "aws_access_key_id" not in kwargs

    def test_static_credentials_and_endpoint(self, mock_boto3):
        S3StorageClient(
            bucket_name="b",
            region="eu-west-1",
            endpoint_url="https://minio.local",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
        )
        kwargs = mock_boto3.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "https://minio.local"
        assert kwargs["aws_access_key_id"] == "AKIA"
        assert kwargs["aws_secret_access_key"] == "secret"
        assert kwargs["config"].region_name == "eu-west-1"
        assert kwargs["config"].signature_version == "s3"

    def test_v4_signing_on_custom_endpoint(self, mock_boto3):
        S3StorageClient(bucket_name="b", endpoint_url="https://minio.local", use_v4_signing=True)
        assert mock_boto3.client.call_args.kwargs["config"].signature_version == "s3v4"


class TestListKeys:
    def test_paginates_under_prefix(self, client: S3StorageClient):
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "nested/test-results-2018-01-01T15:04:05Z.xml"}]},
            {"Contents": [{"Key": "nested/test-results-2018-01-02T15:04:05Z.xml"}]},
        ]
        client._client.get_paginator.return_value = paginator

        assert client.list_keys() == [
            "nested/test-results-2018-01-01T15:04:05Z.xml",
            "nested/test-results-2018-01-02T15:04:05Z.xml",
        ]
        client._client.get_paginator.assert_called_once_with("list_objects_v2")
        paginator.paginate.assert_called_once_with(Bucket="test-bucket", Prefix="nested/")

    def test_empty_bucket(self, client: S3StorageClient):
        paginator = MagicMock()
        paginator.paginate.return_value = [{}]
        client._client.get_paginator.return_value = paginator
        assert client.list_keys() == []

    def test_transport_failure(self, client: S3StorageClient):
        paginator = MagicMock()
        paginator.paginate.side_effect = EndpointConnectionError(endpoint_url="https://s3")
        client._client.get_paginator.return_value = paginator
        with pytest.raises(StorageUnavailableError, match="test-bucket"):
            client.list_keys()


class TestGet:
    def test_streams_body_into_sink(self, client: S3StorageClient):
        body = MagicMock()
        body.iter_chunks.return_value = [b"<test", b"suite/>"]
        client._client.get_object.return_value = {"Body": body}

        sink = io.BytesIO()
        client.get("nested/a.xml", sink)

        assert sink.getvalue() == b"<testsuite/>"
        client._client.get_object.assert_called_once_with(Bucket="test-bucket", Key="nested/a.xml")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404"])
    def test_missing_key(self, client: S3StorageClient, code: str):
        client._client.get_object.side_effect = _client_error(code)
        with pytest.raises(ObjectNotFoundError, match="nested/a.xml"):
            client.get("nested/a.xml", io.BytesIO())

    def test_access_denied_is_unavailable(self, client: S3StorageClient):
        client._client.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StorageUnavailableError, match="unable to fetch"):
            client.get("nested/a.xml", io.BytesIO())


class TestPutAndDelete:
    def test_put_uploads_fileobj(self, client: S3StorageClient):
        source = io.BytesIO(b"data")
        client.put("nested/a.xml", source)
        client._client.upload_fileobj.assert_called_once_with(source, "test-bucket", "nested/a.xml")

    def test_put_to_gcs_disables_multipart(self, mock_boto3):
        client = S3StorageClient(bucket_name="b", endpoint_url="https://storage.googleapis.com")
        client.put("a.xml", io.BytesIO(b"data"))
        transfer_config = client._client.upload_fileobj.call_args.kwargs["Config"]
        assert transfer_config.multipart_threshold > 1024**4

    def test_put_failure(self, client: S3StorageClient):
        client._client.upload_fileobj.side_effect = _client_error("AccessDenied")
        with pytest.raises(StorageUnavailableError, match="unable to upload"):
            client.put("nested/a.xml", io.BytesIO(b"data"))

    def test_delete(self, client: S3StorageClient):
        client.delete("nested/a.xml")
        client._client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="nested/a.xml")

    def test_delete_failure(self, client: S3StorageClient):
        client._client.delete_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StorageUnavailableError, match="unable to delete"):
            client.delete("nested/a.xml")

"""
Name: S3 Image Storage Tests

Responsibilities:
  - Validate adapter uses boto3 client correctly
  - Map botocore errors to typed StorageErrors
  - Avoid real network calls (mocked client)
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from postboard.infrastructure.storage import (
    S3Config,
    S3ImageStorage,
    StorageConfigurationError,
    StoragePermissionError,
    StorageUnavailableError,
    build_image_key,
)

pytestmark = pytest.mark.unit


def _storage(client: MagicMock) -> S3ImageStorage:
    return S3ImageStorage(
        S3Config(bucket="bucket", access_key="key", secret_key="secret"),
        client=client,
    )


def test_upload_uses_put_object():
    client = MagicMock()

    _storage(client).upload_file("posts/a.png", b"data", "image/png")

    client.put_object.assert_called_once_with(
        Bucket="bucket", Key="posts/a.png", Body=b"data", ContentType="image/png"
    )


def test_delete_uses_delete_object():
    client = MagicMock()

    _storage(client).delete_file("posts/a.png")

    client.delete_object.assert_called_once_with(Bucket="bucket", Key="posts/a.png")


def test_presigned_url():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://minio/posts/a.png?sig"

    url = _storage(client).generate_presigned_url("posts/a.png", expires_in_seconds=60)

    assert url == "https://minio/posts/a.png?sig"


def test_missing_bucket_is_configuration_error():
    with pytest.raises(StorageConfigurationError):
        S3ImageStorage(S3Config(bucket="", access_key="k", secret_key="s"), client=MagicMock())


def test_access_denied_maps_to_permission_error():
    client = MagicMock()
    client.put_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )

    with pytest.raises(StoragePermissionError):
        _storage(client).upload_file("posts/a.png", b"data", "image/png")


def test_connection_error_maps_to_unavailable():
    client = MagicMock()
    client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://minio")

    with pytest.raises(StorageUnavailableError):
        _storage(client).upload_file("posts/a.png", b"data", "image/png")


@pytest.mark.parametrize(
    "filename, content_type, suffix",
    [("foto.JPG", "image/jpeg", ".jpg"), (None, "image/png", ".png")],
)
def test_build_image_key(filename, content_type, suffix):
    key = build_image_key(filename, content_type)
    assert key.startswith("posts/")
    assert key.endswith(suffix)

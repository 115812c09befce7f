"""
Tests unitarios para EcsObjectStore y la resolución de credenciales.
"""
from __future__ import annotations

import io
import json
from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from ibsync.infrastructure.storage.object_store import (
    EcsObjectStore,
    build_s3_client,
    load_credentials_file,
    resolve_credentials,
)
from ibsync.shared.exceptions.sync import StoreError, SyncConfigError


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestEcsObjectStore:
    """Tests para get_object / put_object."""

    def test_get_object_returns_body_bytes(self) -> None:
        client = Mock()
        client.get_object.return_value = {"Body": io.BytesIO(b'[{"gduns": 1234567}]')}

        data = EcsObjectStore(client).get_object("testSRS", "customers.json")

        assert data == b'[{"gduns": 1234567}]'
        client.get_object.assert_called_once_with(Bucket="testSRS", Key="customers.json")

    def test_get_object_client_error_becomes_store_error(self) -> None:
        client = Mock()
        client.get_object.side_effect = _client_error("NoSuchKey", "GetObject")

        with pytest.raises(StoreError) as exc_info:
            EcsObjectStore(client).get_object("testSRS", "missing.json")

        assert exc_info.value.details == {"bucket": "testSRS", "key": "missing.json"}

    def test_put_object_returns_unquoted_etag(self) -> None:
        client = Mock()
        client.put_object.return_value = {"ETag": '"abc123"'}

        etag = EcsObjectStore(client).put_object("testInstalls", "1234567.json", b'"OK"')

        assert etag == "abc123"
        client.put_object.assert_called_once_with(
            Bucket="testInstalls",
            Key="1234567.json",
            Body=b'"OK"',
            ContentType="application/json",
        )

    def test_put_object_botocore_error_becomes_store_error(self) -> None:
        client = Mock()
        client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://ecs:9020")

        with pytest.raises(StoreError, match="put_object"):
            EcsObjectStore(client).put_object("testInstalls", "1234567.json", b"{}")


class TestCredentials:
    """Tests para load_credentials_file / resolve_credentials."""

    def test_load_credentials_file(self, tmp_path) -> None:
        path = tmp_path / "ECSconfig.json"
        path.write_text(json.dumps({"accessKeyId": "AK", "secretAccessKey": "SK", "region": "us-west-2"}))

        creds = load_credentials_file(str(path))

        assert creds.access_key_id == "AK"
        assert creds.secret_access_key == "SK"
        assert creds.region == "us-west-2"

    def test_missing_file_raises_config_error(self, tmp_path) -> None:
        with pytest.raises(SyncConfigError) as exc_info:
            load_credentials_file(str(tmp_path / "nope.json"))

        assert exc_info.value.details == {"field": "ECS_CONFIG_PATH"}

    def test_file_without_keys_raises_config_error(self, tmp_path) -> None:
        path = tmp_path / "ECSconfig.json"
        path.write_text(json.dumps({"accessKeyId": "AK"}))

        with pytest.raises(SyncConfigError, match="secretAccessKey"):
            load_credentials_file(str(path))

    def test_file_with_invalid_json_raises_config_error(self, tmp_path) -> None:
        path = tmp_path / "ECSconfig.json"
        path.write_text("{not json")

        with pytest.raises(SyncConfigError):
            load_credentials_file(str(path))

    def test_file_takes_precedence_over_env(self, tmp_path, make_settings) -> None:
        path = tmp_path / "ECSconfig.json"
        path.write_text(json.dumps({"accessKeyId": "FILE_AK", "secretAccessKey": "FILE_SK"}))
        settings = make_settings(
            ECS_CONFIG_PATH=str(path), ECS_ACCESS_KEY_ID="ENV_AK", ECS_SECRET_ACCESS_KEY="ENV_SK"
        )

        creds = resolve_credentials(settings)

        assert creds.access_key_id == "FILE_AK"

    def test_env_credentials(self, make_settings) -> None:
        creds = resolve_credentials(make_settings(ECS_ACCESS_KEY_ID="AK", ECS_SECRET_ACCESS_KEY="SK"))

        assert (creds.access_key_id, creds.secret_access_key) == ("AK", "SK")

    def test_no_credentials_returns_none(self, make_settings) -> None:
        assert resolve_credentials(make_settings(ECS_ACCESS_KEY_ID="", ECS_SECRET_ACCESS_KEY="")) is None


def test_build_s3_client_uses_endpoint_and_path_style(make_settings) -> None:
    settings = make_settings(
        ECS_ENDPOINT="http://ecs.example:9020",
        ECS_ACCESS_KEY_ID="AK",
        ECS_SECRET_ACCESS_KEY="SK",
        ECS_CONFIG_PATH="",
    )

    with patch("ibsync.infrastructure.storage.object_store.boto3.client") as mock_client:
        build_s3_client(settings)

    args, kwargs = mock_client.call_args
    assert args == ("s3",)
    assert kwargs["endpoint_url"] == "http://ecs.example:9020"
    assert kwargs["aws_access_key_id"] == "AK"
    assert kwargs["aws_secret_access_key"] == "SK"
    assert kwargs["config"].s3 == {"addressing_style": "path"}

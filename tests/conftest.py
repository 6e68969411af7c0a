"""
Pytest configuration and fixtures for design-image-service tests.
Provides AWS mocking plus S3, DynamoDB and Cognito fixtures.
"""

import base64
import os
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from moto import mock_aws

from factories import make_design_item

os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-design-images")
os.environ.setdefault("DESIGNS_TABLE_NAME", "test-designs")
os.environ.setdefault("SHARE_LINKS_TABLE_NAME", "test-share-links")
os.environ.setdefault("USERS_TABLE_NAME", "test-users")
os.environ.setdefault("CONSENT_LOG_TABLE_NAME", "test-consent-log")
os.environ.setdefault("PUBLIC_BASE_URL", "https://jewelry.example.com")
os.environ.setdefault("USER_POOL_ID", "us-east-1_placeholder")

os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "design-image-service")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "DesignImageService")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _user_created_gsi() -> dict[str, Any]:
    return {
        "IndexName": "user-created-index",
        "KeySchema": [
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "created_at", "KeyType": "RANGE"},
        ],
        "Projection": {"ProjectionType": "ALL"},
    }


def _create_owned_table(dynamodb_resource, table_name: str, hash_key: str):
    """Helper to create a table keyed by `hash_key` with the user-created GSI."""
    return dynamodb_resource.create_table(
        TableName=table_name,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": hash_key, "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": hash_key, "AttributeType": "S"},
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[_user_created_gsi()],
    )


@pytest.fixture(scope="function")
def designs_table(dynamodb_resource):
    return _create_owned_table(dynamodb_resource, os.environ["DESIGNS_TABLE_NAME"], "design_id")


@pytest.fixture(scope="function")
def share_links_table(dynamodb_resource):
    return _create_owned_table(
        dynamodb_resource,
        os.environ["SHARE_LINKS_TABLE_NAME"],
        "share_token",
    )


@pytest.fixture(scope="function")
def users_table(dynamodb_resource):
    return dynamodb_resource.create_table(
        TableName=os.environ["USERS_TABLE_NAME"],
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "user_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "user_id", "AttributeType": "S"}],
    )


@pytest.fixture(scope="function")
def consent_log_table(dynamodb_resource):
    return dynamodb_resource.create_table(
        TableName=os.environ["CONSENT_LOG_TABLE_NAME"],
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "recorded_at", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "recorded_at", "AttributeType": "S"},
        ],
    )


@pytest.fixture(scope="function")
def all_tables(designs_table, share_links_table, users_table, consent_log_table):
    return {
        "designs": designs_table,
        "share_links": share_links_table,
        "users": users_table,
        "consent_log": consent_log_table,
    }


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the image bucket; moto discards it on context exit."""
    s3_client.create_bucket(Bucket=os.environ["IMAGE_S3_BUCKET_NAME"])
    return s3_client


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., None]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("owner/design/view_1.png", image_bytes)
    """

    def _put(key: str, body: bytes = b"data", content_type: str = "image/png") -> None:
        s3_bucket.put_object(
            Bucket=os.environ["IMAGE_S3_BUCKET_NAME"],
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_list_keys(s3_bucket) -> Callable[[str], list[str]]:
    def _list(prefix: str = "") -> list[str]:
        response = s3_bucket.list_objects_v2(
            Bucket=os.environ["IMAGE_S3_BUCKET_NAME"],
            Prefix=prefix,
        )
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _list


@pytest.fixture
def cognito_user(aws_mock, monkeypatch) -> dict[str, str]:
    """Create a user pool with one user and point USER_POOL_ID at it."""
    client = boto3.client("cognito-idp", region_name=os.getenv("AWS_REGION"))
    pool_id = client.create_user_pool(PoolName="test-pool")["UserPool"]["Id"]
    client.admin_create_user(UserPoolId=pool_id, Username="owner")
    monkeypatch.setenv("USER_POOL_ID", pool_id)

    return {"pool_id": pool_id, "username": "owner"}


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


@pytest.fixture
def stored_design(designs_table, s3_put_object) -> dict[str, Any]:
    """A design owned by OWNER_ID whose two views exist in the bucket."""
    item = make_design_item()
    designs_table.put_item(Item=item)

    for image in item["images"]:
        s3_put_object(image["storage_path"])

    return item

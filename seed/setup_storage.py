#!/usr/bin/env python3
"""
Provision the image bucket and DynamoDB tables on LocalStack.

Run:
    python seed/setup_storage.py --endpoint-url http://localhost:4566
"""

import argparse
import sys
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

logger = Logger(service="seed")

LOCALSTACK_ENDPOINT = "http://localhost:4566"
USER_CREATED_INDEX = "user-created-index"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create storage for the design image service")

    parser.add_argument("--endpoint-url", default=LOCALSTACK_ENDPOINT, help="AWS endpoint")
    parser.add_argument("--region", default="us-east-1")
    parser.add_argument("--bucket", default="design-images")
    parser.add_argument("--designs-table", default="designs")
    parser.add_argument("--share-links-table", default="share_links")
    parser.add_argument("--users-table", default="users")
    parser.add_argument("--consent-log-table", default="consent_log")

    return parser.parse_args()


def _user_created_gsi() -> dict[str, Any]:
    return {
        "IndexName": USER_CREATED_INDEX,
        "KeySchema": [
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "created_at", "KeyType": "RANGE"},
        ],
        "Projection": {"ProjectionType": "ALL"},
    }


def table_definitions(args: argparse.Namespace) -> list[dict[str, Any]]:
    """CreateTable requests for every table the service reads or writes."""
    owned_attributes = [
        {"AttributeName": "user_id", "AttributeType": "S"},
        {"AttributeName": "created_at", "AttributeType": "S"},
    ]

    return [
        {
            "TableName": args.designs_table,
            "KeySchema": [{"AttributeName": "design_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "design_id", "AttributeType": "S"},
                *owned_attributes,
            ],
            "GlobalSecondaryIndexes": [_user_created_gsi()],
        },
        {
            "TableName": args.share_links_table,
            "KeySchema": [{"AttributeName": "share_token", "KeyType": "HASH"}],
            "AttributeDefinitions": [
                {"AttributeName": "share_token", "AttributeType": "S"},
                *owned_attributes,
            ],
            "GlobalSecondaryIndexes": [_user_created_gsi()],
        },
        {
            "TableName": args.users_table,
            "KeySchema": [{"AttributeName": "user_id", "KeyType": "HASH"}],
            "AttributeDefinitions": [{"AttributeName": "user_id", "AttributeType": "S"}],
        },
        {
            "TableName": args.consent_log_table,
            "KeySchema": [
                {"AttributeName": "user_id", "KeyType": "HASH"},
                {"AttributeName": "recorded_at", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "user_id", "AttributeType": "S"},
                {"AttributeName": "recorded_at", "AttributeType": "S"},
            ],
        },
    ]


def create_bucket(s3_client: Any, bucket: str) -> None:
    try:
        s3_client.create_bucket(Bucket=bucket)
        logger.info("Bucket created", extra={"bucket": bucket})
    except ClientError as exc:
        if exc.response["Error"]["Code"] not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
            raise
        logger.info("Bucket already exists", extra={"bucket": bucket})


def create_table(dynamodb_client: Any, definition: dict[str, Any]) -> None:
    table_name = definition["TableName"]

    try:
        dynamodb_client.create_table(BillingMode="PAY_PER_REQUEST", **definition)
        dynamodb_client.get_waiter("table_exists").wait(TableName=table_name)
        logger.info("Table created", extra={"table": table_name})
    except ClientError as exc:
        if exc.response["Error"]["Code"] != "ResourceInUseException":
            raise
        logger.info("Table already exists", extra={"table": table_name})


def enable_share_link_ttl(dynamodb_client: Any, table_name: str) -> None:
    try:
        dynamodb_client.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": "expires_at_epoch"},
        )
    except ClientError as exc:
        # Re-enabling an active TTL is rejected
        if exc.response["Error"]["Code"] != "ValidationException":
            raise
        logger.info("TTL already enabled", extra={"table": table_name})
        return

    logger.info("TTL enabled", extra={"table": table_name})


def setup_storage(args: argparse.Namespace) -> None:
    session_kwargs = {"endpoint_url": args.endpoint_url, "region_name": args.region}
    s3_client = boto3.client("s3", **session_kwargs)
    dynamodb_client = boto3.client("dynamodb", **session_kwargs)

    create_bucket(s3_client, args.bucket)

    for definition in table_definitions(args):
        create_table(dynamodb_client, definition)

    enable_share_link_ttl(dynamodb_client, args.share_links_table)


def main() -> None:
    args = parse_args()

    try:
        setup_storage(args)
    except ClientError:
        logger.exception("Storage setup failed")
        sys.exit(1)

    logger.info("Storage setup complete")


if __name__ == "__main__":
    main()

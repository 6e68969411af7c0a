"""
Scheduled Lambda handler that removes expired share links.

Triggered by an EventBridge schedule. DynamoDB TTL removes expired rows
eventually; this sweep makes removal prompt. Expired links are already
unusable, so the sweep is safe to run alongside resolution.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.dynamodb_share_links import DynamoDBShareLinks
from core.utils.time import utc_now

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    logger.info(
        "Starting expired share link sweep",
        extra={
            "source": event.get("source"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    purged = DynamoDBShareLinks().purge_expired(now=utc_now())

    metrics.add_metric(name="ExpiredShareLinksPurged", unit=MetricUnit.Count, value=purged)
    logger.info("Expired share link sweep finished", extra={"purged": purged})

    return {"purged": purged}

"""
Lambda handler for GDPR data portability (POST/GET /user/export-data).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

from .service import ExportService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle data export requests.

    - POST: returns every record held about the caller as a JSON attachment
    - GET: reports whether an export is possible and when the last one ran

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    method = event.get("httpMethod")
    logger.info(
        "Received data export request",
        extra={
            "http_method": method,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    caller = get_caller_identity(event)
    service = ExportService()

    if method == "GET":
        return ResponseBuilder.ok(service.status(user_id=caller.user_id).model_dump(by_alias=True))

    document, filename = service.export(user_id=caller.user_id)
    metrics.add_metric(name="DataExports", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.attachment(document, filename=filename)

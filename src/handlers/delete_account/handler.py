"""
Lambda handler for GDPR erasure (POST/DELETE/GET /user/delete-account).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import DeleteAccountRequest
from .service import DeleteAccountService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle account erasure requests.

    - POST: schedule deletion, or anonymize now when `immediate` is true
    - DELETE: cancel a scheduled deletion (idempotent)
    - GET: report the current deletion state (no side effects)

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    method = event.get("httpMethod")
    logger.info(
        "Received account deletion request",
        extra={
            "http_method": method,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    caller = get_caller_identity(event)
    service = DeleteAccountService()

    if method == "GET":
        return ResponseBuilder.ok(service.status(user_id=caller.user_id).model_dump(by_alias=True))

    if method == "DELETE":
        return ResponseBuilder.ok(service.cancel(user_id=caller.user_id).model_dump(by_alias=True))

    request = validate_request(DeleteAccountRequest, parse_json_body(event))
    metrics.add_metric(name="DeletionRequests", unit=MetricUnit.Count, value=1)

    if request.immediate:
        result = service.delete_now(caller=caller, reason=request.reason)
        return ResponseBuilder.ok(result.model_dump(by_alias=True))

    scheduled = service.schedule(user_id=caller.user_id, reason=request.reason)
    return ResponseBuilder.ok(scheduled.model_dump(by_alias=True))

"""
Lambda handler for GDPR consent management (POST/GET /user/consent).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import RecordConsentRequest, RecordConsentResponse
from .service import ConsentService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    method = event.get("httpMethod")
    logger.info(
        "Received consent request",
        extra={
            "http_method": method,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    caller = get_caller_identity(event)
    service = ConsentService()

    if method == "GET":
        return ResponseBuilder.ok(service.overview(user_id=caller.user_id).model_dump(by_alias=True))

    request = validate_request(RecordConsentRequest, parse_json_body(event))
    recorded_at = service.record(user_id=caller.user_id, request=request)
    metrics.add_metric(name="ConsentRecorded", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(RecordConsentResponse(recorded_at=recorded_at).model_dump(by_alias=True))

"""
Lambda handler responsible for public share link resolution.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetSharedImagesRequest
from .service import ShareResolverService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /images/shared/{token}.

    No authentication: the token is the credential. Only a short prefix
    of the token is logged.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received shared images request",
        extra={
            "http_method": event.get("httpMethod"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    request = validate_request(
        GetSharedImagesRequest,
        {"token": path_params.get("token") or ""},
        message="Share token is required",
    )

    service = ShareResolverService()
    shared = service.resolve(request.token)

    metrics.add_metric(name="SharedImagesResolved", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(shared.model_dump(by_alias=True))

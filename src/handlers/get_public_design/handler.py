"""
Lambda handler serving designs their owners made public.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetPublicDesignRequest, PublicDesignResponse
from .service import PublicDesignService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /designs/public/{design_id}. No authentication.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received public design request",
        extra={
            "http_method": event.get("httpMethod"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    request = validate_request(
        GetPublicDesignRequest,
        {"design_id": path_params.get("design_id") or ""},
    )

    design = PublicDesignService().get_public_design(design_id=request.design_id)

    metrics.add_metric(name="PublicDesignViews", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(PublicDesignResponse.from_design(design).model_dump(by_alias=True))

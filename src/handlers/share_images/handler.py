"""
Lambda handler responsible for issuing share links for design images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.constants import SHARE_LINK_TTL_DAYS
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import ShareImagesRequest, ShareImagesResponse
from .service import ShareService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /images/share.

    Validation and domain errors are translated by `api_gateway_handler`.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received share link request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    caller = get_caller_identity(event)
    request = validate_request(ShareImagesRequest, parse_json_body(event))

    service = ShareService()
    share_link, share_url = service.issue_share_link(
        design_id=request.design_id,
        user_id=caller.user_id,
        image_paths=request.image_paths,
    )

    metrics.add_metric(name="ShareLinksIssued", unit=MetricUnit.Count, value=1)

    response = ShareImagesResponse(
        share_url=share_url,
        share_token=share_link.share_token,
        expires_at=share_link.expires_at,
        expires_in_days=SHARE_LINK_TTL_DAYS,
    )

    return ResponseBuilder.ok(response.model_dump(by_alias=True))

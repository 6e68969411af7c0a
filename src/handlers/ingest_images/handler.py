"""
Lambda handler responsible for persisting generated images on a design.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import IngestImagesRequest, IngestImagesResponse
from .service import ImageIngestionService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /designs/{design_id}/images.

    This function:
    - Authenticates the caller from the Cognito authorizer claims
    - Validates the batch of source image URLs
    - Copies each image into the bucket and records it on the design
    - Returns a per-item report (a failed item does not fail the request)

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received design image ingestion request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    caller = get_caller_identity(event)
    path_params = event.get("pathParameters") or {}

    body = parse_json_body(event)
    body.pop("designId", None)

    request = validate_request(
        IngestImagesRequest,
        {**body, "design_id": path_params.get("design_id")},
    )

    service = ImageIngestionService()
    results = service.ingest_for_design(
        design_id=request.design_id,
        caller_id=caller.user_id,
        images=request.images,
        replace_existing=request.replace_existing,
    )

    succeeded = sum(1 for result in results if result.succeeded)
    failed = len(results) - succeeded

    metrics.add_metric(name="ImagesIngested", unit=MetricUnit.Count, value=succeeded)
    if failed:
        metrics.add_metric(name="ImageIngestionFailures", unit=MetricUnit.Count, value=failed)

    response = IngestImagesResponse(
        design_id=request.design_id,
        results=results,
        succeeded=succeeded,
        failed=failed,
    )

    return ResponseBuilder.ok(response.model_dump(by_alias=True))

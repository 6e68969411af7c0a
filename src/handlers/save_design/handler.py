"""
Lambda handler responsible for saving designs and listing the caller's designs.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.auth import get_caller_identity
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import DesignView, ListDesignsResponse, SaveDesignRequest, SaveDesignResponse
from .service import DesignService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle POST /designs (save) and GET /designs (list own, newest first).

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received design request",
        extra={
            "http_method": event.get("httpMethod"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    caller = get_caller_identity(event)
    service = DesignService()

    if event.get("httpMethod") == "GET":
        designs = service.list_designs(user_id=caller.user_id)
        listing = ListDesignsResponse(
            designs=[DesignView.from_design(design) for design in designs],
            total=len(designs),
        )
        return ResponseBuilder.ok(listing.model_dump(by_alias=True))

    request = validate_request(SaveDesignRequest, parse_json_body(event))
    design = service.save(user_id=caller.user_id, request=request)

    metrics.add_metric(name="DesignsSaved", unit=MetricUnit.Count, value=1)

    response = SaveDesignResponse(design=DesignView.from_design(design))
    return ResponseBuilder.ok(response.model_dump(by_alias=True))

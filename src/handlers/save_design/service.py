"""Business logic for saving and listing designs."""

import uuid

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_designs import DynamoDBDesigns
from core.models.design import Design
from core.repositories.metadata_repository import DesignRepository
from core.utils.constants import DEFAULT_DESIGN_TITLE, DEFAULT_JEWELRY_TYPE, DESIGN_ID_PREFIX
from core.utils.time import utc_now_iso

from .models import SaveDesignRequest

logger = Logger(UTC=True)


class DesignService:
    """Creates design records; images are attached later by the ingestion route."""

    def __init__(self, designs: DesignRepository | None = None) -> None:
        self.designs = designs or DynamoDBDesigns()

    @staticmethod
    def generate_design_id() -> str:
        """Generate a unique design identifier."""
        return f"{DESIGN_ID_PREFIX}{uuid.uuid4().hex}"

    def save(self, *, user_id: str, request: SaveDesignRequest) -> Design:
        """Persist a new design owned by `user_id`.

        Raises:
            MetadataOperationFailedError: If the design cannot be stored
        """
        design = Design(
            design_id=self.generate_design_id(),
            user_id=user_id,
            title=request.title or DEFAULT_DESIGN_TITLE,
            prompt=request.prompt,
            tags=request.tags,
            jewelry_type=request.jewelry_type or DEFAULT_JEWELRY_TYPE,
            price_cents=request.price_cents,
            currency=request.currency,
            is_public=request.make_public,
            created_at=utc_now_iso(),
        )

        self.designs.create_design(design=design)

        logger.info(
            "Design saved",
            extra={"design_id": design.design_id, "is_public": design.is_public},
        )
        return design

    def list_designs(self, *, user_id: str) -> list[Design]:
        return self.designs.list_user_designs(user_id=user_id)

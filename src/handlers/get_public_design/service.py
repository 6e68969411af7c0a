"""Read access to designs their owners made public."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_designs import DynamoDBDesigns
from core.models.design import Design
from core.models.errors import NotFoundError
from core.repositories.metadata_repository import DesignRepository
from core.utils.constants import ERROR_CODE_DESIGN_NOT_FOUND

logger = Logger(UTC=True)


class PublicDesignService:
    def __init__(self, designs: DesignRepository | None = None) -> None:
        self.designs = designs or DynamoDBDesigns()

    def get_public_design(self, *, design_id: str) -> Design:
        """Return the design if it is public.

        Raises:
            NotFoundError: If the design is missing or private; both cases
                produce the same error
        """
        design = self.designs.get_design(design_id=design_id)

        if design is None or not design.is_public:
            logger.info(
                "Public design unavailable",
                extra={"design_id": design_id, "found": design is not None},
            )
            raise NotFoundError(
                message="Design not found or not public",
                error_code=ERROR_CODE_DESIGN_NOT_FOUND,
            )

        return design

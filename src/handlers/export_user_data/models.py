from pydantic import Field

from core.models.api import ApiModel

GDPR_EXPORT_NOTICE = (
    "You can export your data at any time. "
    "Data is provided as a single JSON document."
)


class ExportStatusResponse(ApiModel):
    """Response model for GET /user/export-data."""

    can_export: bool = True
    last_export: str | None = Field(None, description="ISO-8601 time of the latest export")
    gdpr_compliance: str = GDPR_EXPORT_NOTICE

"""Jewelry Design Image & Privacy Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless design image ingestion, share links and GDPR requests "
    "using AWS Lambda, S3, DynamoDB and Cognito"
)

__all__ = ["handlers", "core"]

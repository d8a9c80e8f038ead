"""
Lambda handler for the question extraction step.

Invoked by Step Functions with one question file per event. Fatal errors
propagate so the state machine's retry policy applies.

Environment variables:
- QUESTION_PIPELINE_DOCUMENTS_BUCKET: S3 bucket with extracted text
- QUESTION_PIPELINE_BEDROCK_MODEL_ID: Bedrock model for extraction
- QUESTION_PIPELINE_DATABASE_URL: PostgreSQL connection string
- DB_SECRET_ARN: Optional secret holding the database password
- LOG_LEVEL: Logging level

Dependencies: entrypoint, boundary.db, lambda_utils
System role: Lambda entry point for question extraction
"""

import asyncio
import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

from rfp_backend.boundary.aws import BedrockRuntimeClient, S3TextClient
from rfp_backend.boundary.db import get_async_engine, get_async_session_factory
from rfp_backend.core.lambda_utils import configure_secrets, validate_environment
from rfp_backend.observability import configure_logging, safe_log_value

from .configs import get_question_pipeline_settings
from .entrypoint import QuestionExtractionPipeline
from .models import ExtractionRunResult

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = (
    "QUESTION_PIPELINE_DOCUMENTS_BUCKET",
    "QUESTION_PIPELINE_BEDROCK_MODEL_ID",
    "QUESTION_PIPELINE_DATABASE_URL",
)


async def _run_pipeline(event: Dict[str, Any]) -> ExtractionRunResult:
    """Run the pipeline with an engine scoped to this invocation's event loop."""
    settings = get_question_pipeline_settings()

    # boto3 clients survive warm starts; the async engine cannot outlive its loop
    if not hasattr(handler, "_text_client"):
        handler._text_client = S3TextClient(settings.documents_bucket, settings.region)
        handler._llm_client = BedrockRuntimeClient(settings.region)

    engine = get_async_engine(settings.database_url)
    try:
        pipeline = QuestionExtractionPipeline.from_settings(
            session_factory=get_async_session_factory(engine=engine),
            settings=settings,
            text_client=handler._text_client,
            llm_client=handler._llm_client,
        )
        return await pipeline.run(event)
    finally:
        await engine.dispose()


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for question extraction events.

    Args:
        event: {questionFileId, projectId, opportunityId, textFileKey}
        context: Lambda context object

    Returns:
        Dict with count of inserted questions and cancelled flag
    """
    logger.info("handler - extract-questions event: %s", safe_log_value(event, 2000))

    configure_secrets("QUESTION_PIPELINE_DATABASE_URL")
    validate_environment(REQUIRED_ENV_VARS)

    result = asyncio.run(_run_pipeline(event))

    logger.info(
        "handler - Extraction finished",
        extra={"count": result.count, "cancelled": result.cancelled},
    )
    return result.to_response()

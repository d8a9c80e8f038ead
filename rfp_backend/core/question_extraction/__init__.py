"""
Question extraction pipeline.

Turns solicitation text into deduplicated, content-addressed question records.

Dependencies: boto3, pydantic, pydantic_settings, sqlalchemy, tenacity
System role: Question extraction step of the RFP pipeline
"""

from .configs import QuestionPipelineSettings, get_question_pipeline_settings
from .entrypoint import QuestionExtractionPipeline
from .models import ExtractionRunResult, PersistResult

__all__ = [
    "QuestionExtractionPipeline",
    "QuestionPipelineSettings",
    "get_question_pipeline_settings",
    "ExtractionRunResult",
    "PersistResult",
]

"""
Extraction event schema.

Dependencies: pydantic
System role: Input contract for the extraction Lambda
"""

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_EVENT_FIELDS = ("projectId", "questionFileId", "textFileKey", "opportunityId")


class ExtractQuestionsEvent(BaseModel):
    """Step Functions payload for one question file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question_file_id: str = Field(alias="questionFileId")
    project_id: str = Field(alias="projectId")
    opportunity_id: str = Field(alias="opportunityId")
    text_file_key: str = Field(alias="textFileKey")

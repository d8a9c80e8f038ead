"""
Storage access for the question extraction pipeline.

Exports: QuestionRepository, QuestionFileStatusStore, QuestionFileStatus
"""

from .question_file_status import QuestionFileStatus, QuestionFileStatusStore
from .question_repository import QuestionRepository

__all__ = ["QuestionRepository", "QuestionFileStatusStore", "QuestionFileStatus"]

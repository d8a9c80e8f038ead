"""
Table definitions for the pipeline's relational storage.

Repositories issue raw SQL against these tables; the metadata here is the
schema of record for migrations and test databases.

Dependencies: sqlalchemy
System role: Database schema
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)

metadata = MetaData()

questions = Table(
    "questions",
    metadata,
    Column("project_id", String(64), nullable=False),
    Column("question_hash", String(64), nullable=False),
    Column("question_id", String(64), nullable=False),
    Column("opportunity_id", String(64), nullable=False),
    Column("question_file_id", String(64), nullable=False),
    Column("section_id", String(64), nullable=False),
    Column("section_title", Text, nullable=False),
    Column("section_description", Text, nullable=True),
    Column("question", Text, nullable=False),
    Column("question_normalized", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    PrimaryKeyConstraint("project_id", "question_hash", name="pk_questions"),
)

question_files = Table(
    "question_files",
    metadata,
    Column("project_id", String(64), nullable=False),
    Column("opportunity_id", String(64), nullable=False),
    Column("question_file_id", String(64), nullable=False),
    Column("status", String(32), nullable=False),
    Column("text_file_key", Text, nullable=True),
    Column("total_questions", Integer, nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
    PrimaryKeyConstraint(
        "project_id", "opportunity_id", "question_file_id", name="pk_question_files"
    ),
)

documents = Table(
    "documents",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("knowledge_base_id", String(64), nullable=False),
    Column("org_id", String(64), nullable=True),
    Column("name", Text, nullable=True),
    Column("indexed", Boolean, nullable=False, default=False),
    Column("index_status", String(32), nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

"""
Core pipeline logic.

Subpackages: question_extraction, chunk_indexing, lambda_utils
"""

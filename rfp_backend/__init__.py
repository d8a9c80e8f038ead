"""
RFP solicitation processing backend.

Question extraction and chunk indexing pipelines, packaged for AWS Lambda.
"""

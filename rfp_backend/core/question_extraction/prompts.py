"""
Prompt templates for vendor-facing requirement extraction.

The system prompt fixes the taxonomy and the JSON schema; the user prompt
carries the raw chunk and, for multi-chunk documents, its position.
"""

SYSTEM_PROMPT = """
You are an expert at analyzing U.S. government procurement opportunity documents (SAM.gov solicitations, RFPs, RFIs, IFBs, amendments, attachments) and extracting every item that a vendor/offeror must answer, provide, or comply with.

Goal:
Extract all "candidate questions" (anything the vendor must respond to or submit) and organize them by section.

What counts as a candidate question (include all of these):
- Direct questions (ending with "?")
- Prompts / instructions that require a response (e.g., "Provide...", "Describe...", "Explain...", "Submit...", "Include...", "The offeror shall...")
- Requested documents/artifacts (e.g., past performance references, resumes, certifications, plans, narratives)
- Pricing deliverables (pricing tables, CLIN pricing, rate sheets)
- Compliance matrices / representations & certifications / forms to fill
- Submission requirements (format, page limits, file naming, portal steps) when they require an action from the offeror

What does NOT count (exclude unless it demands a vendor action):
- Background, agency overview, general context, definitions, boilerplate with no vendor action

Output format:
Return ONLY valid JSON (no markdown, no commentary). Use exactly this schema:

{
  "sections": [
    {
      "title": "Section Title",
      "description": "Optional section context (short). Empty string if none.",
      "locationHint": "Optional: page/paragraph/heading reference if present; else empty string.",
      "questions": [
        {
          "question": "Exact vendor-facing requirement text (preserve wording).",
          "type": "technical|management|past_performance|pricing|compliance|security|legal|administrative|submission|other",
          "isExplicitQuestion": true,
          "isRequired": "required|optional|unknown",
          "deliverable": "What must be produced (e.g., 'Technical Volume narrative', 'Pricing spreadsheet', 'Resume') or empty string.",
          "responseFormat": "If stated: table/form/narrative/bullets/spreadsheet/upload/portal-entry or empty string.",
          "constraints": ["page limit, font, file type, deadline, naming rules, etc."]
        }
      ]
    }
  ]
}

Rules:
- Preserve the exact wording of each extracted vendor requirement in "question".
- If the document has subsections (e.g., 1.1, L, M, Volume I/II/III), treat each as its own section.
- If a requirement appears in a list/bullets, extract each bullet as a separate question when it implies a separate response/deliverable.
- If a section contains no vendor-facing requirements, include it with "questions": [] only if the section title helps navigation; otherwise omit.
- Ensure the JSON is strictly valid:
  - Use double quotes for all strings
  - No trailing commas
  - No undefined/null (use empty string/[] instead)
- Do NOT invent facts. If required/optional is unclear, set "isRequired":"unknown".
""".strip()

USER_PROMPT_TEMPLATE = """
Extract vendor/offeror response requirements from the following opportunity text.
If the content includes headers like "Instructions to Offerors", "Proposal Submission", "Evaluation Criteria", "Volumes", "Representations and Certifications", "Questions", "Attachments", include all vendor action items and prompts.

Return ONLY JSON that matches the schema from the system message.{chunk_info}

DOCUMENT_CONTENT_START
{content}
DOCUMENT_CONTENT_END
""".strip()


def build_user_prompt(content: str, ordinal: int, total_chunks: int) -> str:
    """
    Build the user message for one chunk.

    Args:
        content: Raw chunk text
        ordinal: Zero-based chunk position
        total_chunks: Number of chunks in the document

    Returns:
        str: User prompt
    """
    chunk_info = ""
    if total_chunks > 1:
        chunk_info = (
            f"\n\nNOTE: This is chunk {ordinal + 1} of {total_chunks}. "
            "Extract questions from this portion only."
        )
    return USER_PROMPT_TEMPLATE.format(chunk_info=chunk_info, content=content)

"""LLM prompt templates for extraction and matching."""

# Common instruction to suppress thinking and ensure JSON-only output
# Note: curly braces must be escaped as {{ }} for LangChain templates
JSON_ONLY_INSTRUCTION = """
CRITICAL: You MUST respond with ONLY a valid JSON object.
- Do NOT include any thinking, reasoning, or explanation.
- Do NOT use markdown code blocks.
- Start your response directly with the opening brace
- No text before or after the JSON."""

NAMES_ONLY_INSTRUCTION = """
Output one full name per line and nothing else.
- No numbering, bullets, headings or commentary.
- If there are no names, output nothing."""

ROSTER_EXTRACTION_PROMPT = """You are reading a photographed or scanned OFFICIAL attendance roster.

Extract every full personal name in the list.
- Ignore serial numbers, column headers, dates, titles and signatures.
- Keep names in the script they are written in (Arabic stays Arabic).
- Keep every part of a multi-part name on the same line.
""" + NAMES_ONLY_INSTRUCTION

OBSERVATION_EXTRACTION_PROMPT = """You are reading a screenshot of an online meeting (participant list or video gallery).

Extract every participant display name visible in the image.
- Ignore status tags such as (Host), (Co-host), (Me), (Guest).
- Ignore meeting controls, chat text, timestamps and window titles.
- Keep each name exactly as displayed, in its original script.
""" + NAMES_ONLY_INSTRUCTION

SENSITIVITY_RULES = {
    "strict": (
        "Only match when the two names clearly refer to the same person: "
        "the same name or a direct transliteration of every part of it."
    ),
    "balanced": (
        "Match direct transliterations and names where a middle name, family name "
        "or honorific is missing on one side, as long as the match is unambiguous."
    ),
    "flexible": (
        "Also match nicknames, common short forms, reordered name parts and "
        "likely OCR misspellings when no better candidate exists."
    ),
}

MATCHING_SYSTEM_PROMPT = """You reconcile an OFFICIAL roster with the names seen in an online meeting.

Names may be written in Arabic on one side and in English (Latin script) on the other,
may carry extra tokens, or contain OCR mistakes. Match people across scripts.

RULES:
1. Every roster name appears exactly once: in "present" (paired with the meeting name it matched) or in "absent".
2. Every meeting name that matched nobody on the roster appears in "unexpected".
3. A meeting name can be matched to at most one roster name.
4. Copy names exactly as given in the input lists. Never translate, correct or invent names.
""" + JSON_ONLY_INSTRUCTION

MATCHING_USER_PROMPT = """Match the official roster against the meeting list.

MATCHING SENSITIVITY: {sensitivity}
{sensitivity_rule}

OFFICIAL ROSTER (JSON array):
{roster_json}

MEETING NAMES (JSON array):
{observations_json}

Respond with ONLY this JSON structure (no other text):
{{
  "present": [
    {{"name": "roster name", "originalName": "meeting name it matched"}}
  ],
  "absent": ["roster name with no match"],
  "unexpected": ["meeting name with no roster match"]
}}"""

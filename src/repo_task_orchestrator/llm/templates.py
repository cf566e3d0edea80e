"""Prompt templates for the generation steps of the built-in tasks."""

from __future__ import annotations

COMMIT_MESSAGE = """\
<GIT_DIFF>
{diff}
</GIT_DIFF>

Create a summary git commit message with a maximum 80 character description and a maximum \
of 5 bullet points to describe the GIT_DIFF as succinctly as possible, highlighting key \
changes in the commit. Do not include any "prefix:" like "feat:" or "bug:" on the summary. \
Add bullet points with "*" and a single space after the "*" before the text for the bullet \
point.
"""

CODER = """\
You are a software engineer working in the repository at {cwd}.

Take the original PROMPT, with its summary and suggested steps, and evaluate each of those \
steps. For each step evaluate what files may need to be changed in order to complete the \
step, then describe the exact changes.

PROMPT: {request}
"""

TESTER = """\
You are a software engineer working in the repository at {cwd}.

Write or update the automated tests covering the change described by the PROMPT. Describe \
each test file and the test cases it must contain.

PROMPT: {request}
"""

EVALUATE_REQUEST = """\
OUTPUT the following JSON object, substituting in the results of your evaluation. Use the \
TASK DESCRIPTION as the context when generating text for the JSON properties.

TASK DESCRIPTION:
{transcription}

The JSON object to OUTPUT is:
{{
    "summary": "(( a 3-5 word summary of the TASK DESCRIPTION, as short as possible, no punctuation ))",
    "modifiesFiles": (( boolean true if the TASK DESCRIPTION involves creating or modifying files, otherwise false )),
    "transcription": "(( the complete TASK DESCRIPTION ))"
}}
"""

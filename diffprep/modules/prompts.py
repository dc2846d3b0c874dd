"""
Prompt templates for commit message generation.

The system prompt asks for a JSON answer; the chunked and summarized
variants tell the model how the diff was reduced.
"""

from __future__ import annotations

from typing import Union

from .diff_processing.models import ProcessedResult, Strategy

BASE_SYSTEM_PROMPT = """You are a helpful assistant that generates concise, meaningful git commit messages based on git diffs.

Format your response as JSON:
{
  "commitMessage": "type: brief description",
  "description": "More detailed explanation of what changed and why",
  "summary": "High-level summary of the changes"
}

Follow conventional commit format (feat:, fix:, docs:, style:, refactor:, test:, chore:).
Keep commit messages under 72 characters.
Focus on the "what" and "why" of changes, not the "how"."""

CHUNKED_ADDENDUM = """

This diff has been processed and chunked due to its size. Files are prioritized by importance.
Focus on the most significant changes and provide a commit message that captures the overall intent."""

SUMMARIZED_ADDENDUM = """

This is a summarized view of a very large changeset. Focus on the high-level changes and overall purpose.
The commit message should reflect the main goal or theme of this large set of changes."""


def system_prompt(strategy: Union[Strategy, str]) -> str:
    """System prompt for the given processing strategy."""
    strategy = Strategy(strategy)
    if strategy == Strategy.CHUNKED:
        return BASE_SYSTEM_PROMPT + CHUNKED_ADDENDUM
    if strategy == Strategy.SUMMARIZED:
        return BASE_SYSTEM_PROMPT + SUMMARIZED_ADDENDUM
    return BASE_SYSTEM_PROMPT


def build_user_prompt(result: ProcessedResult) -> str:
    """Wrap a processed payload in the user prompt."""
    prompt = f"Please analyze this git diff and generate a commit message:\n\n{result.payload}"

    if result.strategy == Strategy.CHUNKED:
        prompt += (
            f"\n\nAdditional context: This changeset affects {result.total_files} files total, "
            f"with {result.total_lines_added} additions and {result.total_lines_deleted} deletions."
        )
    elif result.strategy == Strategy.SUMMARIZED:
        prompt += (
            "\n\nNote: This represents a large changeset that has been summarized. "
            "Focus on the overall theme and purpose."
        )

    return prompt

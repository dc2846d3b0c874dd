"""Extraction of commit messages from generation-service answers."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from loguru import logger

from .schemas import (
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_DESCRIPTION,
    DEFAULT_SUMMARY,
    CommitMessage,
)

CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(response: str) -> Optional[Dict[str, Any]]:
    """Find the first JSON object in ``response``, handling markdown code blocks."""
    for match in CODE_BLOCK.findall(response):
        try:
            parsed = json.loads(match.strip())
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    try:
        parsed = json.loads(response.strip())
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    for match in JSON_OBJECT.findall(response):
        try:
            parsed = json.loads(match)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    return None


def parse_commit_response(response: str) -> CommitMessage:
    """
    Parse a commit message out of free-form generation text.

    JSON answers are read field by field; anything else falls back to the
    first non-empty line as the message and the remaining lines as the
    description.
    """
    data = extract_json_object(response or "")

    if data is not None:
        return CommitMessage(
            commit_message=data.get("commitMessage") or DEFAULT_COMMIT_MESSAGE,
            description=data.get("description") or DEFAULT_DESCRIPTION,
            summary=data.get("summary") or DEFAULT_SUMMARY,
        )

    logger.debug("Generation response is not JSON, using line fallback")
    lines = [line.strip() for line in (response or "").split("\n") if line.strip()]
    return CommitMessage(
        commit_message=lines[0] if lines else DEFAULT_COMMIT_MESSAGE,
        description=" ".join(lines[1:]) or DEFAULT_DESCRIPTION,
        summary=DEFAULT_SUMMARY,
    )

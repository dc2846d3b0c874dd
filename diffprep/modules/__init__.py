# diffprep modules
# Version: 0.1 - Diff processing engine with validation and prompt support

# Core engine
from .diff_processing import (
    DiffProcessingEngine,
    DiffProcessingError,
    DiffValidationError,
    EmptyInputError,
    MalformedDiffError,
    ProcessedResult,
    Strategy,
    process_diff,
)

# Configuration
from .config import ConfigError, ProcessorConfig, load_config

# Pydantic schemas
from .schemas import CommitMessage, ProcessingInfo

# Upstream validation
from .validation import ValidationResult, ensure_valid_git_diff, is_valid_git_diff, validate_git_diff

# Prompt construction and response parsing
from .prompts import build_user_prompt, system_prompt
from .response_parser import parse_commit_response

# Result cache
from .cache import ResultCache, content_key, process_cached

__all__ = [
    # Engine
    "DiffProcessingEngine",
    "DiffProcessingError",
    "DiffValidationError",
    "EmptyInputError",
    "MalformedDiffError",
    "ProcessedResult",
    "Strategy",
    "process_diff",
    # Config
    "ConfigError",
    "ProcessorConfig",
    "load_config",
    # Schemas
    "CommitMessage",
    "ProcessingInfo",
    # Validation
    "ValidationResult",
    "ensure_valid_git_diff",
    "is_valid_git_diff",
    "validate_git_diff",
    # Prompts
    "build_user_prompt",
    "system_prompt",
    "parse_commit_response",
    # Cache
    "ResultCache",
    "content_key",
    "process_cached",
]

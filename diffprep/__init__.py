"""diffprep - Large diff preparation for commit message generation."""

__version__ = "0.1.0"

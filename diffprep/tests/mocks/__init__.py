"""
Test mocks package for diffprep

Builds deterministic unified diff text for tests without touching git.
"""

from typing import List, Optional

PLAIN_PROSE = """Refactored the login flow so sessions are refreshed lazily.
Also cleaned up a few helper names and updated the docs.
"""


def make_file_diff(
    path: str,
    added: int = 3,
    deleted: int = 1,
    kind: str = "modified",
    hunks: int = 1,
    line_width: int = 20,
    old_path: Optional[str] = None,
) -> str:
    """
    Build one ``diff --git`` file section.

    Args:
        path: Post-change file path
        added: '+' lines per hunk
        deleted: '-' lines per hunk
        kind: "modified", "added", "deleted" or "renamed"
        hunks: Number of hunks
        line_width: Characters per changed line (controls section size)
        old_path: Pre-rename path for kind="renamed"
    """
    source = old_path or path
    lines: List[str] = [f"diff --git a/{source} b/{path}"]

    if kind == "added":
        lines.append("new file mode 100644")
        lines.append("index 0000000..1111111")
        lines.append("--- /dev/null")
        lines.append(f"+++ b/{path}")
    elif kind == "deleted":
        lines.append("deleted file mode 100644")
        lines.append("index 1111111..0000000")
        lines.append(f"--- a/{path}")
        lines.append("+++ /dev/null")
    elif kind == "renamed":
        lines.append("similarity index 90%")
        lines.append(f"rename from {source}")
        lines.append(f"rename to {path}")
        lines.append("index 1111111..2222222 100644")
        lines.append(f"--- a/{source}")
        lines.append(f"+++ b/{path}")
    else:
        lines.append("index 1111111..2222222 100644")
        lines.append(f"--- a/{path}")
        lines.append(f"+++ b/{path}")

    filler = "x" * max(1, line_width)
    for h in range(hunks):
        start = 1 + h * 100
        lines.append(f"@@ -{start},{deleted + 2} +{start},{added + 2} @@ def block_{h}():")
        lines.append(" context line")
        for i in range(deleted):
            lines.append(f"-old {h}.{i} {filler}")
        for i in range(added):
            lines.append(f"+new {h}.{i} {filler}")
        lines.append(" context line")

    return "\n".join(lines) + "\n"


def make_diff(paths: List[str], **kwargs) -> str:
    """Concatenate one file section per path."""
    return "".join(make_file_diff(path, **kwargs) for path in paths)


def make_sized_file_diff(path: str, target_bytes: int, kind: str = "modified") -> str:
    """Build a single-hunk section of roughly ``target_bytes`` bytes."""
    line_width = 60
    per_line = len(f"+new 0.0 {'x' * line_width}\n")
    header = len(make_file_diff(path, added=0, deleted=0, kind=kind))
    added = max(1, (target_bytes - header) // per_line)
    return make_file_diff(path, added=added, deleted=0, kind=kind, line_width=line_width)

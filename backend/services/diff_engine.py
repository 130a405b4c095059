"""
Diff Engine - Compute hunks between two texts at a chosen granularity
"""

from __future__ import annotations

from difflib import unified_diff
from typing import Sequence

from models.diff import DiffHunk, DiffOptions, DiffResult, DiffStats, Granularity, HunkKind

from .tokenizer import comparison_key, tokenize

# (tag, i1, i2, j1, j2) with tag in "equal", "delete", "insert", "replace"
Opcode = tuple[str, int, int, int, int]


def myers_opcodes(a: Sequence[str], b: Sequence[str]) -> list[Opcode]:
    """Minimal edit script between two key sequences as difflib-style opcodes.

    The common prefix and suffix are matched first so the earliest unchanged
    run wins ties; the middle is aligned with Myers' O(ND) algorithm.
    """
    n, m = len(a), len(b)

    prefix = 0
    while prefix < n and prefix < m and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while suffix < n - prefix and suffix < m - prefix and a[n - 1 - suffix] == b[m - 1 - suffix]:
        suffix += 1

    middle_ops = _myers_path(a[prefix:n - suffix], b[prefix:m - suffix])

    ops: list[str] = ["equal"] * prefix + middle_ops + ["equal"] * suffix
    return _group_ops(ops)


def _myers_path(a: Sequence[str], b: Sequence[str]) -> list[str]:
    """Shortest edit path as a list of "equal" / "delete" / "insert" steps"""
    n, m = len(a), len(b)
    if n == 0:
        return ["insert"] * m
    if m == 0:
        return ["delete"] * n

    # Frontier: diagonal k -> furthest x reached; one snapshot per edit distance
    v: dict[int, int] = {1: 0}
    trace: list[dict[int, int]] = []
    found = False
    for d in range(n + m + 1):
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                x = v[k + 1]
            else:
                x = v[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x
            if x >= n and y >= m:
                found = True
                break
        if found:
            break

    # Walk the trace backwards from (n, m)
    steps: list[str] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[k - 1] < v[k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            steps.append("equal")
            x -= 1
            y -= 1
        if d > 0:
            steps.append("insert" if x == prev_x else "delete")
        x, y = prev_x, prev_y

    steps.reverse()
    return steps


def _group_ops(ops: list[str]) -> list[Opcode]:
    """Collapse single steps into ranges, merging adjacent edits into one block"""
    opcodes: list[Opcode] = []
    i = j = 0
    pos = 0
    while pos < len(ops):
        if ops[pos] == "equal":
            start_i, start_j = i, j
            while pos < len(ops) and ops[pos] == "equal":
                i += 1
                j += 1
                pos += 1
            opcodes.append(("equal", start_i, i, start_j, j))
            continue

        start_i, start_j = i, j
        while pos < len(ops) and ops[pos] != "equal":
            if ops[pos] == "delete":
                i += 1
            else:
                j += 1
            pos += 1
        if i > start_i and j > start_j:
            tag = "replace"
        elif i > start_i:
            tag = "delete"
        else:
            tag = "insert"
        opcodes.append((tag, start_i, i, start_j, j))
    return opcodes


class DiffEngine:
    """Compute structured diffs between two texts"""

    def diff(
        self,
        old_content: str,
        new_content: str,
        granularity: Granularity = Granularity.LINE,
        options: DiffOptions | None = None,
    ) -> DiffResult:
        """Generate an ordered hunk list covering both inputs"""
        old_tokens = tokenize(old_content, granularity)
        new_tokens = tokenize(new_content, granularity)
        key = comparison_key(granularity, options)

        opcodes = myers_opcodes([key(t) for t in old_tokens], [key(t) for t in new_tokens])
        hunks = self._extract_hunks(old_tokens, new_tokens, opcodes)

        return DiffResult(
            granularity=granularity,
            hunks=hunks,
            stats=self._compute_stats(old_tokens, new_tokens, opcodes),
        )

    def _extract_hunks(
        self,
        original: list[str],
        modified: list[str],
        opcodes: list[Opcode],
    ) -> list[DiffHunk]:
        """Turn opcodes into hunks; a replace yields removed then added"""
        hunks: list[DiffHunk] = []

        def add(kind: HunkKind, source: str, target: str):
            hunks.append(
                DiffHunk(
                    id=f"hunk-{len(hunks)}",
                    kind=kind,
                    source_text=source,
                    target_text=target,
                )
            )

        for tag, i1, i2, j1, j2 in opcodes:
            old_text = "".join(original[i1:i2])
            new_text = "".join(modified[j1:j2])
            if tag == "equal":
                add(HunkKind.UNCHANGED, old_text, new_text)
                continue
            if i2 > i1:
                add(HunkKind.REMOVED, old_text, "")
            if j2 > j1:
                add(HunkKind.ADDED, "", new_text)

        return hunks

    def _compute_stats(
        self,
        original: list[str],
        modified: list[str],
        opcodes: list[Opcode],
    ) -> DiffStats:
        stats = DiffStats()
        for tag, i1, i2, j1, j2 in opcodes:
            if tag == "equal":
                stats.unchanged += i2 - i1
            else:
                stats.removed += i2 - i1
                stats.added += j2 - j1

        longest = max(len(original), len(modified))
        stats.similarity = stats.unchanged / longest if longest else 1.0
        return stats

    def unified_diff(
        self,
        original_content: str,
        new_content: str,
        from_label: str = "a",
        to_label: str = "b",
        context_lines: int = 3,
    ) -> str:
        """Generate a standard unified diff"""
        original_lines = original_content.splitlines(keepends=True)
        new_lines = new_content.splitlines(keepends=True)

        # Ensure last lines have newlines for proper diff
        if original_lines and not original_lines[-1].endswith("\n"):
            original_lines[-1] += "\n"
        if new_lines and not new_lines[-1].endswith("\n"):
            new_lines[-1] += "\n"

        return "".join(
            unified_diff(
                original_lines,
                new_lines,
                fromfile=from_label,
                tofile=to_label,
                n=context_lines,
            )
        )

    def inline_preview(
        self,
        original_content: str,
        new_content: str,
        context_lines: int = 3,
    ) -> str:
        """Generate inline preview with context lines around changes"""
        original_lines = original_content.splitlines()
        new_lines = new_content.splitlines()

        result_lines = []
        for tag, i1, i2, j1, j2 in myers_opcodes(original_lines, new_lines):
            if tag == "equal":
                # Show context lines only
                for i in range(i1, i2):
                    if i < i1 + context_lines or i >= i2 - context_lines:
                        result_lines.append(f"  {original_lines[i]}")
                    elif result_lines and not result_lines[-1].startswith("..."):
                        result_lines.append("...")
                continue
            for line in original_lines[i1:i2]:
                result_lines.append(f"- {line}")
            for line in new_lines[j1:j2]:
                result_lines.append(f"+ {line}")

        return "\n".join(result_lines)


def diff_texts(
    old_content: str,
    new_content: str,
    granularity: Granularity = Granularity.LINE,
    options: DiffOptions | None = None,
) -> DiffResult:
    """Module-level shortcut for DiffEngine().diff"""
    return DiffEngine().diff(old_content, new_content, granularity, options)


"""State shared by the steps of one code change request."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from pathlib import Path

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_MAX_SLUG_WORDS = 6


def slugify(text: str) -> str:
    """Kebab-case the first few words of `text`."""

    words = [w for w in _NON_ALNUM.split(text.lower()) if w]
    return "-".join(words[:_MAX_SLUG_WORDS])


def make_request_id(summary: str | None = None) -> str:
    """A branch-safe id: `<kebab summary>-<8 hex>`, or `request-<8 hex>`."""

    suffix = uuid.uuid4().hex[:8]
    slug = slugify(summary or "") or "request"
    return f"{slug}-{suffix}"


@dataclass(slots=True)
class CodeRequest:
    """One requested change, worked on in its own git worktree and branch.

    The composite task creates this and hands the same object to each of its
    steps; earlier steps fill in what later steps need.
    """

    request_id: str
    worktree_dir: Path
    text: str | None = None
    summary: str | None = None
    repository_branch: str | None = None
    # Set when the request turns out to need no file changes; later steps are skipped.
    skip_reason: str | None = None

    @property
    def short_id(self) -> str:
        return self.request_id.rsplit("-", 1)[-1]

    @property
    def branch(self) -> str:
        return self.request_id

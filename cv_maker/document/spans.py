"""
Inline emphasis handling: `**bold**` pairs split a line into plain and
bold runs. Only one level is supported; a marker pair never nests.
"""

from __future__ import annotations

import re
from typing import Iterable, Tuple

from .models import TextRun

BOLD_MARKER = "**"

_BOLD_PAIR = re.compile(r"(\*\*[^*]+\*\*)")


def has_emphasis(text: str) -> bool:
    return bool(_BOLD_PAIR.search(text or ""))


def parse_spans(text: str) -> Tuple[TextRun, ...]:
    runs = []
    for segment in _BOLD_PAIR.split(text or ""):
        if not segment:
            continue
        if _BOLD_PAIR.fullmatch(segment):
            runs.append(TextRun(segment[2:-2], bold=True))
        else:
            runs.append(TextRun(segment))
    return tuple(runs)


def clean_runs(runs: Iterable[TextRun]) -> Tuple[TextRun, ...]:
    return tuple(run for run in runs if run.text)


def runs_to_text(runs: Iterable[TextRun]) -> str:
    return "".join(run.text for run in runs)


def runs_to_markup(runs: Iterable[TextRun]) -> str:
    # Italic has no marker in the dialect and is written as plain text.
    return "".join(f"{BOLD_MARKER}{run.text}{BOLD_MARKER}" if run.bold else run.text for run in runs)

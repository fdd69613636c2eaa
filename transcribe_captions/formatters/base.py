"""Abstract base formatter.

WHY: The workflow should not care how cues become file content. A small
formatter interface keeps rendering separate from orchestration and lets
tests exercise the caption text without running a workflow.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method taking the segmented cues and returning the file content.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``name`` appears in the workflow's progress messages
- Formatters never modify the cues they receive
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from transcribe_captions.core.ir import SubtitleCue


class BaseFormatter(ABC):
    """Abstract base for caption formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Captions'."""

    @abstractmethod
    def format(self, cues: Sequence[SubtitleCue]) -> str:
        """Render cues into caption file content."""

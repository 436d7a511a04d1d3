"""Greedy line breaking over styled runs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence

from ..utils.enums import WrapMode
from .text_metrics import TextRun

if TYPE_CHECKING:
    from .text_metrics import TextShaper

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\s+|\S+")

# Tolerance for floating point width sums
_EPSILON = 1e-6


@dataclass(slots=True)
class _Token:
    is_space: bool
    pieces: List[TextRun] = field(default_factory=list)


class LineBreaker:
    """

    Breaks one hard line into visual lines no wider than ``max_width``.

    - WORD: break at whitespace only; an over-long word overflows its line
    - CHAR: break between any two characters
    - WORD_CHAR: break at whitespace, falling back to character breaks for
      words wider than a whole line

    Whitespace at a break point is dropped from the end of the line.

    """

    def __init__(self, shaper: "TextShaper"):
        self.shaper = shaper

    def break_runs(self, runs: Sequence[TextRun], max_width: float, mode: WrapMode) -> List[List[TextRun]]:
        if mode == WrapMode.CHAR:
            tokens = self._char_tokens(runs)
        else:
            tokens = self._word_tokens(runs)

        lines: List[List[TextRun]] = []
        current: List[_Token] = []
        width = 0.0

        for token in tokens:
            token_width = self._width(token.pieces)
            if token.is_space:
                current.append(token)
                width += token_width
                continue
            if width + token_width <= max_width + _EPSILON or (mode == WrapMode.WORD and not _has_content(current)):
                current.append(token)
                width += token_width
                continue

            if _has_content(current):
                lines.append(_flatten(current, strip_trailing=True))
                current = []
                width = 0.0

            if token_width <= max_width + _EPSILON or mode == WrapMode.WORD:
                current.append(token)
                width += token_width
                continue

            # Word wider than a line: fill the current line char by char
            for char_token in self._char_tokens(token.pieces):
                char_width = self._width(char_token.pieces)
                if width + char_width > max_width + _EPSILON and _has_content(current):
                    lines.append(_flatten(current, strip_trailing=True))
                    current = []
                    width = 0.0
                current.append(char_token)
                width += char_width

        lines.append(_flatten(current, strip_trailing=False))
        logger.debug(f"Broke hard line into {len(lines)} line(s) at width {max_width:.2f}")
        return lines

    def _width(self, pieces: Sequence[TextRun]) -> float:
        return sum(self.shaper.text_width(piece.text, piece.font) for piece in pieces)

    @staticmethod
    def _word_tokens(runs: Sequence[TextRun]) -> List[_Token]:
        tokens: List[_Token] = []
        for run in runs:
            for match in _TOKEN.finditer(run.text):
                piece = match.group(0)
                is_space = piece[0].isspace()
                if tokens and tokens[-1].is_space == is_space:
                    tokens[-1].pieces.append(TextRun(piece, run.font))
                else:
                    tokens.append(_Token(is_space, [TextRun(piece, run.font)]))
        return tokens

    @staticmethod
    def _char_tokens(runs: Sequence[TextRun]) -> List[_Token]:
        return [
            _Token(char.isspace(), [TextRun(char, run.font)])
            for run in runs
            for char in run.text
        ]


def _has_content(tokens: Sequence[_Token]) -> bool:
    return any(not token.is_space for token in tokens)


def _flatten(tokens: List[_Token], strip_trailing: bool) -> List[TextRun]:
    if strip_trailing:
        while tokens and tokens[-1].is_space:
            tokens = tokens[:-1]
    return [piece for token in tokens for piece in token.pieces]

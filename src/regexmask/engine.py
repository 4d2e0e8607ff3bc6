"""Core masking engine."""

import re
from typing import Optional

from regexmask.models import MaskError, MaskPolicy, MaskResult

ASTERISK = "*"


class MaskingEngine:
    """
    Length-preserving masking engine.

    The engine walks the non-overlapping, leftmost-first matches of a compiled
    pattern and overwrites every matched character with a single filler
    character, so the output is always as long as the input.
    """

    def apply(
        self,
        compiled: "re.Pattern[str]",
        text: str,
        policy: MaskPolicy = MaskPolicy.FILL_ASTERISK,
        mask_char: Optional[str] = None,
    ) -> MaskResult:
        """
        Mask every match of compiled in text.

        Args:
            compiled: Compiled pattern (owned by a PatternCache)
            text: Text to mask
            policy: FILL_ASTERISK or REPLACE_CHAR
            mask_char: Replacement character, required by REPLACE_CHAR

        Returns:
            MaskResult with masked text, or INVALID_MASK_LENGTH
        """
        filler = self._get_filler(policy, mask_char)
        if filler is None:
            return MaskResult.failure(
                MaskError.INVALID_MASK_LENGTH,
                f"Mask character must be exactly one character, got {mask_char!r}",
            )

        parts: list[str] = []
        last = 0
        match_count = 0
        for regex_match in compiled.finditer(text):
            start, end = self._bounded_span(regex_match.start(), regex_match.end(), last, len(text))
            if end <= start:
                continue
            parts.append(text[last:start])
            parts.append(filler * (end - start))
            last = end
            match_count += 1

        if match_count == 0:
            return MaskResult(text=text)

        parts.append(text[last:])
        return MaskResult(text="".join(parts), match_count=match_count)

    def _get_filler(self, policy: MaskPolicy, mask_char: Optional[str]) -> Optional[str]:
        """Get filler character for a policy, or None if mask_char is invalid."""
        if policy == MaskPolicy.REPLACE_CHAR:
            if mask_char is None or len(mask_char) != 1:
                return None
            return mask_char
        return ASTERISK

    @staticmethod
    def _bounded_span(start: int, end: int, last: int, length: int) -> tuple[int, int]:
        """Clamp a reported span to the unwritten part of the text."""
        start = min(max(start, last), length)
        end = min(max(end, start), length)
        return start, end

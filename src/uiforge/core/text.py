"""Cleanup of raw model output."""

import re

_OPENING_FENCE = re.compile(r"```\w+", re.MULTILINE)
_CLOSING_FENCE = re.compile(r"```\n?$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code-fence wrapping from generated markup.

    Drops language-tagged opening fences (```html) and fences that end a line,
    then trims surrounding whitespace. Repeats until nothing changes, so the
    result is a fixed point: stripping it again returns it unchanged.

    Args:
        text: Raw model output

    Returns:
        Cleaned markup
    """
    while True:
        cleaned = _CLOSING_FENCE.sub("", _OPENING_FENCE.sub("", text)).strip()
        if cleaned == text:
            return cleaned
        text = cleaned

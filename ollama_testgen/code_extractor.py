"""
Code Extractor - Recovers source code from a model reply.

Models often wrap code in markdown fences and surround it with prose. The
extraction spans from the first opening fence to the LAST closing fence in
the whole reply, so anything between two code blocks (prose included) ends
up in the result.
"""

FENCE = "```"


def _slice_between(text: str, marker: str) -> str | None:
    """Return the trimmed text between the first ``marker`` and the last fence.

    Returns None when the last fence does not come after the opening marker.
    """
    start = text.find(marker) + len(marker)
    end = text.rfind(FENCE)
    if end > start:
        return text[start:end].strip()
    return None


def extract_code(raw_text: str, language: str = "java") -> str:
    """
    Extract code from a possibly fenced model reply.

    Args:
        raw_text: Full model response text
        language: Language tag to look for after the opening fence

    Returns:
        The fenced content (trimmed), or ``raw_text`` unchanged when no
        usable fence pair exists
    """
    tagged = f"{FENCE}{language}"
    if language and tagged in raw_text:
        code = _slice_between(raw_text, tagged)
        if code is not None:
            return code

    if FENCE in raw_text:
        code = _slice_between(raw_text, FENCE)
        if code is not None:
            return code

    # No code block - assume the whole reply is source
    return raw_text

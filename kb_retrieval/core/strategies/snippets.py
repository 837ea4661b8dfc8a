"""Query-dependent snippet extraction."""

MAX_SNIPPET_LENGTH = 300
MIN_WINDOW_LENGTH = 20
FALLBACK_LINES = 3


def _truncate(text: str, limit: int = MAX_SNIPPET_LENGTH) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def extract_snippet(
    content: str,
    terms: list[str],
    min_term_length: int = 3,
) -> str:
    """Extract a short excerpt around the first matching query term.

    Terms are tried in query order. For a term found on line i, the window
    is one line before through three lines after. Windows of 20 characters
    or less are skipped. Without any usable window, the first few lines
    that are not headings or separators are returned.

    Args:
        content: Document text.
        terms: Lower-cased query terms.
        min_term_length: Shorter terms are ignored.

    Returns:
        Snippet of at most 300 characters plus an ellipsis.
    """
    lines = content.split("\n")

    for term in terms:
        if len(term) < min_term_length:
            continue

        for i, line in enumerate(lines):
            if term not in line.lower():
                continue

            start = max(0, i - 1)
            end = min(len(lines), i + 3)
            snippet = "\n".join(lines[start:end]).strip()

            if len(snippet) > MIN_WINDOW_LENGTH:
                return _truncate(snippet)

    meaningful = [
        line for line in lines
        if line.strip() and not line.startswith("#") and not line.startswith("---")
    ]
    return _truncate("\n".join(meaningful[:FALLBACK_LINES]))

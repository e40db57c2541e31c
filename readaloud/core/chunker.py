import re

WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def chunk_text(text: str, limit: int) -> list[str]:
    """Split ``text`` into reading-order chunks of at most ``limit`` characters.

    Words are packed greedily and joined with single spaces. A word longer than
    ``limit`` on its own is cut at the limit and its remainder carried into the
    next chunk.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    cleaned = normalize_whitespace(text)
    if len(cleaned) <= limit:
        return [cleaned]

    chunks: list[str] = []
    current = ""

    for word in cleaned.split(" "):
        pending = f"{current} {word}" if current else word
        if len(pending) <= limit:
            current = pending
            continue

        if current:
            chunks.append(current)
            current = word
        else:
            current = pending

        while len(current) > limit:
            chunks.append(current[:limit])
            current = current[limit:]

    if current:
        chunks.append(current)

    return chunks

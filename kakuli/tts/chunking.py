from typing import List

DEFAULT_CHUNK_LENGTH = 300


def split_text(text: str, max_length: int = DEFAULT_CHUNK_LENGTH) -> List[str]:
    """
    Cut ``text`` into consecutive slices of at most ``max_length`` characters.

    Slices ignore word boundaries, so ``"".join(split_text(t)) == t`` and the
    number of slices is ``ceil(len(t) / max_length)``.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    return [text[i : i + max_length] for i in range(0, len(text), max_length)]

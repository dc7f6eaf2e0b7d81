import math

import pytest

from kakuli.tts import split_text


@pytest.mark.parametrize("length", [0, 1, 299, 300, 301, 500, 900])
def test_chunk_count_and_rejoin(length):
    text = "".join(chr(ord("a") + i % 26) for i in range(length))
    chunks = split_text(text, 300)
    assert len(chunks) == math.ceil(length / 300)
    assert "".join(chunks) == text
    assert all(len(c) <= 300 for c in chunks)


def test_chunks_ignore_word_boundaries():
    assert split_text("hello world", 4) == ["hell", "o wo", "rld"]


def test_non_positive_length_is_rejected():
    with pytest.raises(ValueError):
        split_text("abc", 0)

"""String helpers used to grade typed answers."""

import re

_NON_WORD = re.compile(r"[^\w\s]")


def normalize_answer(text: str) -> str:
    """Lowercase, trim and drop punctuation; used for pass/fail grading."""
    return _NON_WORD.sub("", text.lower().strip())


def normalize_for_similarity(text: str) -> str:
    """Lowercase and trim only. Punctuation still counts as an edit."""
    return text.lower().strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions or
    substitutions that turn ``a`` into ``b``."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]

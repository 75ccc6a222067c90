# src/debate_kit/topics/similarity.py

from collections import Counter


def compare_two_strings(first: str, second: str) -> float:
    """Dice coefficient over character bigrams, ignoring whitespace.

    Returns 1.0 for identical strings and 0.0 when either string has
    fewer than two characters. Each bigram of ``first`` can be matched
    at most as many times as it occurs.
    """
    first = "".join(first.split())
    second = "".join(second.split())

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    remaining = Counter(first[i : i + 2] for i in range(len(first) - 1))
    intersection = 0
    for i in range(len(second) - 1):
        bigram = second[i : i + 2]
        if remaining[bigram] > 0:
            remaining[bigram] -= 1
            intersection += 1

    return (2.0 * intersection) / (len(first) + len(second) - 2)

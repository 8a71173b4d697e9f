"""Levenshtein-based string similarity used to rank task names."""


def edit_distance(first: str, second: str) -> int:
    """
    Case-insensitive Levenshtein distance.

    Keeps a single row of costs sized to the shorter string.

    Examples:
        >>> edit_distance("kitten", "sitting")
        3
        >>> edit_distance("Task", "task")
        0
    """
    longer, shorter = first.lower(), second.lower()
    if len(longer) < len(shorter):
        longer, shorter = shorter, longer

    costs = list(range(len(shorter) + 1))
    for i, char_a in enumerate(longer, start=1):
        diagonal, costs[0] = costs[0], i
        for j, char_b in enumerate(shorter, start=1):
            above = costs[j]
            costs[j] = min(
                above + 1,
                costs[j - 1] + 1,
                diagonal + (char_a != char_b),
            )
            diagonal = above
    return costs[-1]


def calculate_similarity(first: str, second: str) -> float:
    """
    Similarity between 0.0 and 1.0 relative to the longer string.

    Returns 0 when either string is empty or missing, including when both are.

    Examples:
        >>> calculate_similarity("kitten", "kitten")
        1.0
        >>> round(calculate_similarity("abc", "abd"), 3)
        0.667
    """
    if not first or not second:
        return 0.0
    # lowercasing can lengthen a string, e.g. "İ"
    longer_length = max(len(first.lower()), len(second.lower()))
    return (longer_length - edit_distance(first, second)) / float(longer_length)

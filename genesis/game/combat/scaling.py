"""Floor-based enemy intensity."""

BASE_X = 6
MIN_X = 1


def resolve_x(floor: int) -> int:
    """X value for a floor: ``max(1, 6 + floor // 2)``.

    Raises:
        ValueError: If floor is negative
    """
    if floor < 0:
        raise ValueError(f"floor must not be negative, got {floor}")
    return max(MIN_X, BASE_X + floor // 2)

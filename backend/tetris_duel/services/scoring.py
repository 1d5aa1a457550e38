LINE_SCORES = {
    1: 100,
    2: 300,
    3: 500,
    4: 800,
}


def score_for(lines_cleared: int) -> int:
    """Points awarded for clearing ``lines_cleared`` rows with a single lock.

    Standard clears of 1-4 rows use the classic table; any other positive
    count scores 100 per row.
    """
    if lines_cleared <= 0:
        return 0
    return LINE_SCORES.get(lines_cleared, lines_cleared * 100)


def garbage_lines_for(lines_cleared: int) -> int:
    """Garbage rows sent to the opponent; a single cleared row sends none."""
    if lines_cleared <= 1:
        return 0
    return lines_cleared - 1

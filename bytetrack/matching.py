"""Association helpers for the BYTE tracker: IoU costs, assignment and track-list algebra."""

from __future__ import annotations

import math
from typing import Sequence

from bytetrack.lapjv import lapjv_internal
from bytetrack.track import Track

DUPLICATE_IOU_DISTANCE = 0.15


def _iou(a: Sequence[float], b: Sequence[float], b_area: float) -> float:
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    iw = min(ax2, bx2) - max(ax1, bx1) + 1
    if iw <= 0:
        return 0.0
    ih = min(ay2, by2) - max(ay1, by1) + 1
    if ih <= 0:
        return 0.0
    union = (ax2 - ax1 + 1) * (ay2 - ay1 + 1) + b_area - iw * ih
    return iw * ih / union


def ious(
    atlbrs: Sequence[Sequence[float]], btlbrs: Sequence[Sequence[float]]
) -> list[list[float]]:
    """Pairwise IoU of (x1, y1, x2, y2) boxes, with inclusive pixel extents.

    Returns an empty list when either side is empty.
    """
    if not atlbrs or not btlbrs:
        return []
    b_areas = [(b[2] - b[0] + 1) * (b[3] - b[1] + 1) for b in btlbrs]
    return [[_iou(a, b, area) for b, area in zip(btlbrs, b_areas)] for a in atlbrs]


def iou_distance(atracks: Sequence[Track], btracks: Sequence[Track]) -> list[list[float]]:
    """Cost matrix ``1 - IoU`` between two lists of tracks (empty if either list is)."""
    overlaps = ious([t.tlbr for t in atracks], [t.tlbr for t in btracks])
    return [[1 - value for value in row] for row in overlaps]


def lapjv(
    cost: Sequence[Sequence[float]],
    extend_cost: bool = False,
    cost_limit: float = math.inf,
    return_cost: bool = True,
) -> tuple[float, list[int], list[int]]:
    """Solve a (possibly rectangular) assignment problem.

    Returns ``(total_cost, rowsol, colsol)``; ``rowsol[i]`` is the column of
    row ``i`` and ``colsol[j]`` the row of column ``j``, ``-1`` when unmatched.
    With a finite ``cost_limit`` pairs costing more than the limit are left
    unmatched.
    """
    rows = [[float(c) for c in row] for row in cost]
    n_rows = len(rows)
    if n_rows == 0:
        return 0.0, [], []
    n_cols = len(rows[0])
    if any(len(row) != n_cols for row in rows):
        raise ValueError("cost matrix rows must all have the same length")
    if n_rows != n_cols and not extend_cost:
        raise ValueError("a non-square cost matrix needs extend_cost=True")

    limited = cost_limit < math.inf
    extended = extend_cost or limited
    if extended:
        n = n_rows + n_cols
        if limited:
            fill = cost_limit / 2.0
        else:
            fill = max([-1.0, *(c for row in rows for c in row)]) + 1
        matrix = [[fill] * n for _ in range(n)]
        for i in range(n_rows, n):
            for j in range(n_cols, n):
                matrix[i][j] = 0.0
        for i, row in enumerate(rows):
            matrix[i][:n_cols] = row
    else:
        matrix = rows

    x, y = lapjv_internal(matrix)

    if extended:
        rowsol = [j if j < n_cols else -1 for j in x[:n_rows]]
        colsol = [i if i < n_rows else -1 for i in y[:n_cols]]
    else:
        rowsol, colsol = x, y

    total = 0.0
    if return_cost:
        total = sum(matrix[i][j] for i, j in enumerate(rowsol) if j != -1)
    return total, rowsol, colsol


def linear_assignment(
    cost_matrix: Sequence[Sequence[float]], n_rows: int, n_cols: int, thresh: float
) -> tuple[list[tuple[int, int]], list[int], list[int]]:
    """Match rows to columns with costs under ``thresh``.

    ``n_rows`` and ``n_cols`` give the problem size when ``cost_matrix`` is
    empty. Returns ``(matches, unmatched_rows, unmatched_cols)``.
    """
    if not cost_matrix:
        return [], list(range(n_rows)), list(range(n_cols))

    _, rowsol, colsol = lapjv(cost_matrix, True, thresh)
    matches = [(i, j) for i, j in enumerate(rowsol) if j >= 0]
    unmatched_a = [i for i, j in enumerate(rowsol) if j < 0]
    unmatched_b = [j for j, i in enumerate(colsol) if i < 0]
    return matches, unmatched_a, unmatched_b


def join_tracks(tlista: Sequence[Track], tlistb: Sequence[Track]) -> list[Track]:
    """All of ``tlista`` followed by the tracks of ``tlistb`` whose id is not yet present."""
    seen = {t.track_id for t in tlista}
    result = list(tlista)
    for track in tlistb:
        if track.track_id not in seen:
            seen.add(track.track_id)
            result.append(track)
    return result


def sub_tracks(tlista: Sequence[Track], tlistb: Sequence[Track]) -> list[Track]:
    """Tracks of ``tlista`` whose id is absent from ``tlistb``, ordered by track id.

    Of several tracks in ``tlista`` sharing an id only the first is kept.
    """
    by_id: dict[int, Track] = {}
    for track in tlista:
        by_id.setdefault(track.track_id, track)
    for track in tlistb:
        by_id.pop(track.track_id, None)
    return [by_id[track_id] for track_id in sorted(by_id)]


def remove_duplicate_tracks(
    tracks_a: Sequence[Track], tracks_b: Sequence[Track]
) -> tuple[list[Track], list[Track]]:
    """Drop overlapping tracks, keeping the longer-lived one of each near-identical pair."""
    dup_a: set[int] = set()
    dup_b: set[int] = set()
    for i, row in enumerate(iou_distance(tracks_a, tracks_b)):
        for j, distance in enumerate(row):
            if distance < DUPLICATE_IOU_DISTANCE:
                age_a = tracks_a[i].frame_id - tracks_a[i].start_frame
                age_b = tracks_b[j].frame_id - tracks_b[j].start_frame
                if age_a > age_b:
                    dup_b.add(j)
                else:
                    dup_a.add(i)
    res_a = [t for i, t in enumerate(tracks_a) if i not in dup_a]
    res_b = [t for j, t in enumerate(tracks_b) if j not in dup_b]
    return res_a, res_b
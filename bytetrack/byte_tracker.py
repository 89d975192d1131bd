"""Multi-class, multi-stream BYTE tracker built on IoU association."""

from __future__ import annotations

import copy
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from bytetrack.kalman_filter import KalmanFilter
from bytetrack.matching import (
    iou_distance,
    join_tracks,
    linear_assignment,
    remove_duplicate_tracks,
    sub_tracks,
)
from bytetrack.track import Detection, Track, TrackState, multi_predict, tlbr_to_tlwh

DEFAULT_FRAME_RATE = 30
DEFAULT_TRACK_BUFFER = 30
DEFAULT_HIGH_DET_THRESH = 0.5
DEFAULT_NEW_TRACK_THRESH = 0.3
DEFAULT_HIGH_MATCH_THRESH = 0.8
DEFAULT_LOW_MATCH_THRESH = 0.5
DEFAULT_UNCONFIRMED_MATCH_THRESH = 0.7


@dataclass
class ByteTrackerConfig:
    """Tracker parameters: class count, lost-track lifetime and association thresholds."""

    n_classes: int = 1
    frame_rate: int = DEFAULT_FRAME_RATE
    track_buffer: int = DEFAULT_TRACK_BUFFER
    high_det_thresh: float = DEFAULT_HIGH_DET_THRESH
    new_track_thresh: float = DEFAULT_NEW_TRACK_THRESH
    high_match_thresh: float = DEFAULT_HIGH_MATCH_THRESH
    low_match_thresh: float = DEFAULT_LOW_MATCH_THRESH
    unconfirmed_match_thresh: float = DEFAULT_UNCONFIRMED_MATCH_THRESH


def _clone(track: Track) -> Track:
    return copy.copy(track)


def _per_class() -> defaultdict[int, list[Track]]:
    return defaultdict(list)


class ByteTracker:
    """Associates detections with tracklets, separately per stream and per class."""

    def __init__(self, config: ByteTrackerConfig | None = None) -> None:
        config = config if config is not None else ByteTrackerConfig()
        self.config = config
        self.n_classes = config.n_classes
        self.max_time_lost = config.track_buffer
        self.high_det_thresh = config.high_det_thresh
        self.new_track_thresh = config.new_track_thresh
        self.high_match_thresh = config.high_match_thresh
        self.low_match_thresh = config.low_match_thresh
        self.unconfirmed_match_thresh = config.unconfirmed_match_thresh

        self.frame_count = 0
        self.kalman_filter = KalmanFilter()
        self._tracked: defaultdict[int, defaultdict[int, list[Track]]] = defaultdict(_per_class)
        self._lost: defaultdict[int, defaultdict[int, list[Track]]] = defaultdict(_per_class)
        self._removed: defaultdict[int, defaultdict[int, list[Track]]] = defaultdict(_per_class)

    def update(
        self, stream_id: int, frame_id: int, objects: Iterable[Detection]
    ) -> dict[int, list[Track]]:
        """Feed one frame's detections; return the output tracks of every class.

        The output holds, per class id, the activated tracked tracks followed by
        the tracks removed in this frame.
        """
        self.frame_count += 1
        if self.frame_count == 1:
            Track.reset_ids()

        by_class: defaultdict[int, list[Detection]] = defaultdict(list)
        for obj in objects:
            by_class[obj.label].append(obj)

        tracked = self._tracked[stream_id]
        lost = self._lost[stream_id]
        removed = self._removed[stream_id]

        output: dict[int, list[Track]] = {}
        for cls_id in range(self.n_classes):
            tracked[cls_id], lost[cls_id], removed[cls_id] = self._update_class(
                cls_id, frame_id, by_class.get(cls_id, []), tracked[cls_id], lost[cls_id]
            )
            output[cls_id] = [t for t in tracked[cls_id] if t.is_activated] + list(removed[cls_id])
        return output

    def _associate(
        self,
        track: Track,
        det: Track,
        frame_id: int,
        activated: list[Track],
        refind: list[Track],
    ) -> None:
        if track.state == TrackState.TRACKED:
            track.update(det, self.frame_count, frame_id)
            activated.append(_clone(track))
        else:
            track.re_activate(det, self.frame_count, frame_id, False)
            refind.append(_clone(track))

    def _update_class(
        self,
        cls_id: int,
        frame_id: int,
        objects: Sequence[Detection],
        tracked: list[Track],
        lost: list[Track],
    ) -> tuple[list[Track], list[Track], list[Track]]:
        dets: list[Track] = []
        dets_low: list[Track] = []
        for obj in objects:
            det = Track(tlbr_to_tlwh(obj.tlbr), obj.prob, cls_id, frame_id, obj)
            (dets if obj.prob >= self.high_det_thresh else dets_low).append(det)

        unconfirmed = [t for t in tracked if not t.is_activated]
        confirmed = [t for t in tracked if t.is_activated]

        activated: list[Track] = []
        refind: list[Track] = []
        lost_new: list[Track] = []
        removed_new: list[Track] = []

        # First association: high-score detections against confirmed and lost tracks.
        pool = join_tracks(confirmed, lost)
        multi_predict(pool, self.kalman_filter)
        matches, u_track, u_det = linear_assignment(
            iou_distance(pool, dets), len(pool), len(dets), self.high_match_thresh
        )
        for i, j in matches:
            self._associate(pool[i], dets[j], frame_id, activated, refind)
        remaining = [dets[j] for j in u_det]

        # Second association: low-score detections against still-tracked tracks.
        unmatched = [pool[i] for i in u_track if pool[i].state == TrackState.TRACKED]
        matches, u_track, _ = linear_assignment(
            iou_distance(unmatched, dets_low), len(unmatched), len(dets_low), self.low_match_thresh
        )
        for i, j in matches:
            self._associate(unmatched[i], dets_low[j], frame_id, activated, refind)
        for i in u_track:
            track = unmatched[i]
            if track.state != TrackState.LOST:
                track.mark_lost()
                lost_new.append(_clone(track))

        # Unconfirmed tracks against the high-score detections left over.
        matches, u_unconfirmed, u_det = linear_assignment(
            iou_distance(unconfirmed, remaining),
            len(unconfirmed),
            len(remaining),
            self.unconfirmed_match_thresh,
        )
        for i, j in matches:
            track = unconfirmed[i]
            track.update(remaining[j], self.frame_count, frame_id)
            activated.append(_clone(track))
        for i in u_unconfirmed:
            track = unconfirmed[i]
            track.mark_removed()
            removed_new.append(_clone(track))

        # New tracks.
        for j in u_det:
            det = remaining[j]
            if det.score < self.new_track_thresh:
                continue
            det.activate(self.kalman_filter, self.frame_count, frame_id)
            activated.append(det)

        # Expire lost tracks.
        for track in lost:
            if self.frame_count - track.end_frame() > self.max_time_lost:
                track.mark_removed()
                removed_new.append(_clone(track))

        new_tracked = [_clone(t) for t in tracked if t.state == TrackState.TRACKED]
        new_tracked = join_tracks(new_tracked, activated)
        new_tracked = join_tracks(new_tracked, refind)

        new_lost = sub_tracks(lost, new_tracked)
        new_lost.extend(lost_new)
        new_removed = removed_new
        new_lost = sub_tracks(new_lost, new_removed)

        new_tracked, new_lost = remove_duplicate_tracks(new_tracked, new_lost)
        return new_tracked, new_lost, new_removed
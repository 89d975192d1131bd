"""Single tracklet state for the BYTE tracker."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence

import numpy as np

from bytetrack.kalman_filter import KalmanFilter


class TrackState(enum.IntEnum):
    NEW = 0
    TRACKED = 1
    LOST = 2
    REMOVED = 3


@dataclass
class Detection:
    """A detector output: box (top-left corner, width, height), class label and confidence."""

    x: float
    y: float
    width: float
    height: float
    label: int = 0
    prob: float = 0.0

    @property
    def tlbr(self) -> list[float]:
        return [self.x, self.y, self.x + self.width, self.y + self.height]


def tlbr_to_tlwh(tlbr: Sequence[float]) -> list[float]:
    """Convert (x1, y1, x2, y2) into (x1, y1, w, h)."""
    x1, y1, x2, y2 = tlbr
    return [x1, y1, x2 - x1, y2 - y1]


def tlwh_to_xyah(tlwh: Sequence[float]) -> list[float]:
    """Convert (x1, y1, w, h) into (center x, center y, w / h, h)."""
    x, y, w, h = tlwh
    return [x + w * 0.5, y + h * 0.5, w / h, h]


def multi_predict(tracks: Iterable["Track"], kalman_filter: KalmanFilter) -> None:
    """Advance the Kalman state of every track by one step."""
    for track in tracks:
        mean = track.mean.copy()
        if track.state != TrackState.TRACKED:
            mean[7] = 0.0
        track.mean, track.covariance = kalman_filter.predict(mean, track.covariance)


class Track:
    """One tracked object with its Kalman state and bookkeeping."""

    _last_id: ClassVar[int] = 0

    def __init__(
        self,
        tlwh: Sequence[float],
        score: float,
        class_id: int,
        real_frame_id: int,
        detection: Detection | None = None,
    ) -> None:
        self.raw_tlwh: list[float] = list(tlwh)
        self.is_activated = False
        self.track_id = 0
        self.state = TrackState.NEW
        self.mean = np.zeros(8)
        self.covariance = np.zeros((8, 8))
        self.tlwh: list[float] = [0.0] * 4
        self.tlbr: list[float] = [0.0] * 4
        self._refresh_boxes()

        self.frame_id = 0
        self.tracklet_len = 0
        self.start_frame = 0
        self.class_id = class_id
        self.score = score
        self.real_frame_id = real_frame_id
        self.detection = detection
        self.kalman_filter = KalmanFilter()

    def __repr__(self) -> str:
        return (
            f"Track(id={self.track_id}, class_id={self.class_id}, state={self.state.name}, "
            f"tlwh={self.tlwh}, score={self.score})"
        )

    @classmethod
    def reset_ids(cls) -> None:
        """Restart track numbering."""
        Track._last_id = 0

    @classmethod
    def next_id(cls, class_id: int) -> int:
        """Return a fresh track id; numbering is shared across classes."""
        Track._last_id += 1
        return Track._last_id

    def _refresh_boxes(self) -> None:
        if self.state == TrackState.NEW:
            self.tlwh = list(self.raw_tlwh)
        else:
            cx, cy, aspect, h = (float(v) for v in self.mean[:4])
            w = aspect * h
            self.tlwh = [cx - w * 0.5, cy - h * 0.5, w, h]
        x, y, w, h = self.tlwh
        self.tlbr = [x, y, x + w, y + h]

    def to_xyah(self) -> list[float]:
        return tlwh_to_xyah(self.tlwh)

    def mark_lost(self) -> None:
        self.state = TrackState.LOST

    def mark_removed(self) -> None:
        self.state = TrackState.REMOVED

    def end_frame(self) -> int:
        return self.frame_id

    def activate(self, kalman_filter: KalmanFilter, frame_id: int, real_frame_id: int) -> None:
        """Start a new tracklet from this detection."""
        self.kalman_filter = kalman_filter
        self.track_id = Track.next_id(self.class_id)
        self.mean, self.covariance = kalman_filter.initiate(tlwh_to_xyah(self.raw_tlwh))
        self._refresh_boxes()

        self.tracklet_len = 0
        self.state = TrackState.NEW
        self.is_activated = True
        self.frame_id = frame_id
        self.real_frame_id = real_frame_id
        self.start_frame = frame_id

    def _correct(self, new_track: "Track") -> None:
        self.mean, self.covariance = self.kalman_filter.update(
            self.mean, self.covariance, tlwh_to_xyah(new_track.tlwh), new_track.score
        )
        self.raw_tlwh = list(new_track.tlwh)
        self._refresh_boxes()

    def re_activate(
        self, new_track: "Track", frame_id: int, real_frame_id: int, new_id: bool = False
    ) -> None:
        """Revive a lost or unconfirmed tracklet with a matched detection."""
        self._correct(new_track)
        self.tracklet_len = 0
        self.frame_id = frame_id
        self.score = new_track.score
        self.real_frame_id = real_frame_id
        self.state = TrackState.TRACKED
        self.is_activated = True
        if new_id:
            self.state = TrackState.NEW
            self.track_id = Track.next_id(self.class_id)

    def update(self, new_track: "Track", frame_id: int, real_frame_id: int) -> None:
        """Update a tracked tracklet with a matched detection."""
        self.frame_id = frame_id
        self.tracklet_len += 1
        self._correct(new_track)
        self.state = TrackState.TRACKED
        self.is_activated = True
        self.score = new_track.score
        self.real_frame_id = real_frame_id
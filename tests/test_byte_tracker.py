import pytest

from bytetrack.byte_tracker import ByteTracker, ByteTrackerConfig
from bytetrack.track import Detection, TrackState


def _det(x=10.0, y=20.0, w=40.0, h=80.0, label=0, prob=0.9):
    return Detection(x=x, y=y, width=w, height=h, label=label, prob=prob)


def test_config_defaults_match_documented_constants():
    config = ByteTrackerConfig()
    assert config.n_classes == 1
    assert config.frame_rate == 30
    assert config.track_buffer == 30
    assert config.high_det_thresh == pytest.approx(0.5)
    assert config.new_track_thresh == pytest.approx(0.3)
    assert config.high_match_thresh == pytest.approx(0.8)
    assert config.low_match_thresh == pytest.approx(0.5)
    assert config.unconfirmed_match_thresh == pytest.approx(0.7)


def test_first_frame_creates_new_activated_track():
    tracker = ByteTracker(ByteTrackerConfig(n_classes=3))
    out = tracker.update(0, 100, [_det()])
    assert sorted(out) == [0, 1, 2]
    assert out[1] == [] and out[2] == []
    assert len(out[0]) == 1
    track = out[0][0]
    assert track.state == TrackState.NEW
    assert track.is_activated
    assert track.track_id == 1
    assert track.real_frame_id == 100
    assert track.raw_tlwh == pytest.approx([10.0, 20.0, 40.0, 80.0])


def test_second_frame_keeps_id_and_becomes_tracked():
    tracker = ByteTracker(ByteTrackerConfig())
    first = tracker.update(0, 1, [_det()])[0][0]
    out = tracker.update(0, 2, [_det(x=11.0)])
    assert len(out[0]) == 1
    track = out[0][0]
    assert track.track_id == first.track_id
    assert track.state == TrackState.TRACKED
    assert track.real_frame_id == 2
    assert track.raw_tlwh == pytest.approx([11.0, 20.0, 40.0, 80.0])


def test_moving_object_keeps_identity():
    tracker = ByteTracker(ByteTrackerConfig())
    ids = set()
    for frame in range(1, 8):
        out = tracker.update(0, frame, [_det(x=10.0 + 2 * frame)])
        assert len(out[0]) == 1
        ids.add(out[0][0].track_id)
    assert len(ids) == 1


def test_low_score_detection_does_not_start_track():
    tracker = ByteTracker(ByteTrackerConfig())
    assert tracker.update(0, 1, [_det(prob=0.4)])[0] == []
    assert tracker.update(0, 2, [_det(prob=0.2)])[0] == []


def test_low_score_detection_keeps_tracked_track_alive():
    tracker = ByteTracker(ByteTrackerConfig())
    tracker.update(0, 1, [_det()])
    tracked = tracker.update(0, 2, [_det()])[0][0]
    out = tracker.update(0, 3, [_det(prob=0.2)])
    assert [t.track_id for t in out[0]] == [tracked.track_id]
    assert out[0][0].state == TrackState.TRACKED
    assert out[0][0].score == pytest.approx(0.2)


def test_lost_track_is_removed_after_buffer():
    tracker = ByteTracker(ByteTrackerConfig(track_buffer=2))
    tracker.update(0, 1, [_det()])
    track_id = tracker.update(0, 2, [_det()])[0][0].track_id

    assert tracker.update(0, 3, [])[0] == []
    assert tracker.update(0, 4, [])[0] == []
    out = tracker.update(0, 5, [])
    assert [t.track_id for t in out[0]] == [track_id]
    assert out[0][0].state == TrackState.REMOVED
    assert tracker.update(0, 6, [])[0] == []


def test_lost_track_is_recovered_with_same_id():
    tracker = ByteTracker(ByteTrackerConfig())
    tracker.update(0, 1, [_det()])
    track_id = tracker.update(0, 2, [_det()])[0][0].track_id
    assert tracker.update(0, 3, [])[0] == []
    out = tracker.update(0, 4, [_det()])
    assert [t.track_id for t in out[0]] == [track_id]
    assert out[0][0].state == TrackState.TRACKED


def test_unmatched_new_track_is_dropped_and_next_gets_new_id():
    tracker = ByteTracker(ByteTrackerConfig())
    first = tracker.update(0, 1, [_det()])[0][0]
    assert tracker.update(0, 2, [])[0] == []
    out = tracker.update(0, 3, [_det()])
    assert len(out[0]) == 1
    assert out[0][0].track_id > first.track_id
    assert out[0][0].state == TrackState.NEW


def test_classes_are_tracked_separately():
    tracker = ByteTracker(ByteTrackerConfig(n_classes=2))
    out = tracker.update(0, 1, [_det(label=0), _det(label=1)])
    assert [t.class_id for t in out[0]] == [0]
    assert [t.class_id for t in out[1]] == [1]
    assert out[0][0].track_id != out[1][0].track_id


def test_labels_outside_class_range_are_ignored():
    tracker = ByteTracker(ByteTrackerConfig(n_classes=1))
    out = tracker.update(0, 1, [_det(label=5)])
    assert out == {0: []}


def test_streams_are_independent():
    tracker = ByteTracker(ByteTrackerConfig())
    a = tracker.update(0, 1, [_det()])[0][0]
    b = tracker.update(1, 1, [_det()])[0][0]
    assert a.track_id != b.track_id
    out = tracker.update(1, 2, [])
    assert out[0] == []
    out0 = tracker.update(0, 2, [_det()])
    assert [t.track_id for t in out0[0]] == [a.track_id]


def test_separate_objects_get_distinct_ids():
    tracker = ByteTracker(ByteTrackerConfig())
    out = tracker.update(0, 1, [_det(x=0.0), _det(x=500.0)])
    ids = [t.track_id for t in out[0]]
    assert len(ids) == 2
    assert len(set(ids)) == 2


def test_new_tracker_restarts_numbering():
    ByteTracker(ByteTrackerConfig()).update(0, 1, [_det(), _det(x=500.0)])
    out = ByteTracker(ByteTrackerConfig()).update(0, 1, [_det()])
    assert out[0][0].track_id == 1
# bytetrack

A multi-object tracker for detector output. It uses every detection, including
the low-confidence ones. A constant-velocity Kalman filter predicts each track.
Tracks are then matched to detections by IoU, using a Jonker-Volgenant
linear-assignment solver. Each stream and each class is tracked separately.

## Installation

```
pip install .
```

To install the test requirements and run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from bytetrack.byte_tracker import ByteTracker, ByteTrackerConfig
from bytetrack.track import Detection

tracker = ByteTracker(ByteTrackerConfig(n_classes=2))

detections = [
    Detection(x=10, y=20, width=50, height=100, label=0, prob=0.9),
    Detection(x=200, y=40, width=80, height=60, label=1, prob=0.4),
]
result = tracker.update(stream_id=0, frame_id=1, objects=detections)
for class_id, tracks in result.items():
    for track in tracks:
        print(class_id, track.track_id, track.state.name, track.tlwh, track.score)
```

A `Detection` is a box given as its top-left corner, width and height, plus a
class `label` and a confidence `prob`. Labels must lie in
`range(n_classes)`. Detections with any other label are ignored.

`ByteTracker.update` returns a dict that maps each class id in
`range(n_classes)` to a list of `Track` objects. Each list contains:

- the activated tracks currently being followed, whose state is
  `TrackState.NEW` or `TrackState.TRACKED`;
- the tracks removed in this frame, whose state is `TrackState.REMOVED`.

Each `Track` has the following attributes:

- `track_id`;
- `class_id`;
- `state`;
- `score`;
- `tlwh` and `tlbr`, the box from the Kalman estimate, or the detection box
  while the track is new;
- `raw_tlwh`, the box of the last matched detection;
- `frame_id`, the tracker's own frame count at the last update;
- `real_frame_id`, the `frame_id` passed to `update`;
- `detection`.

Track ids are shared across classes. They restart at 1 on the first `update`
of a tracker.

### Configuration

All fields of `ByteTrackerConfig` have defaults:

| field                      | default | meaning                                              |
|----------------------------|---------|------------------------------------------------------|
| `n_classes`                | 1       | number of class ids tracked                          |
| `frame_rate`               | 30      | stored only                                          |
| `track_buffer`             | 30      | frames a lost track is kept before removal           |
| `high_det_thresh`          | 0.5     | detections at or above this are high-confidence      |
| `new_track_thresh`         | 0.3     | minimum score to start a new track                   |
| `high_match_thresh`        | 0.8     | IoU-distance limit for the first association         |
| `low_match_thresh`         | 0.5     | IoU-distance limit for low-confidence detections     |
| `unconfirmed_match_thresh` | 0.7     | IoU-distance limit for unconfirmed tracks            |

### Building blocks

- `bytetrack.kalman_filter.KalmanFilter` is an 8-state filter over
  `(x, y, aspect, height)` and their velocities. It provides `initiate`,
  `predict`, `project`, `update` and `gating_distance`. All of them return new
  arrays. The measurement noise is scaled by `1 - score`.
  `gating_distance(..., only_position=True)` raises `ValueError`.
- `bytetrack.track` provides `Track`, `TrackState` and `Detection`, and the
  helper functions `tlbr_to_tlwh`, `tlwh_to_xyah` and `multi_predict`.
- `bytetrack.lapjv.lapjv_internal(cost)` solves a square assignment problem.
  It returns `(x, y)`, the column of each row and the row of each column. It
  raises `AssignmentError` if the matrix is not square or the problem cannot be
  solved.
- `bytetrack.matching` provides the following functions:
  - `ious`, pairwise IoU with inclusive pixel extents;
  - `iou_distance`, the cost `1 - IoU`;
  - `lapjv`, which solves rectangular problems using `extend_cost` and an
    optional `cost_limit`, and returns `(total_cost, rowsol, colsol)`;
  - `linear_assignment`;
  - `join_tracks`;
  - `sub_tracks`;
  - `remove_duplicate_tracks`.
- `bytetrack.pipeline.PipelineBase` is a base class for frame pipelines. It
  provides:
  - a bounded `input_queue` of `Frame` objects;
  - `send_frame`, which takes a timeout in milliseconds and raises
    `PipelineError` if the queue stays full;
  - `register_result_callback`;
  - `start`, which launches two daemon threads;
  - `stop` and `is_running`.

  Subclasses override `run` and `result_callback_thread`. The base versions
  only log an error and wait.

## What this package does not do

- It contains no object detector. Detections must come from your own code.
- It does not decode, crop or encode images or video.
- It provides no command-line program.
- `PipelineBase` does no processing by itself. A concrete pipeline that
  connects a detector to `ByteTracker` must be written as a subclass.
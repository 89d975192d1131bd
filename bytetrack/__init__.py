"""Multi-object tracking with a Kalman filter, IoU association and a frame pipeline base."""

__version__ = "0.1.0"
__all__ = ["byte_tracker", "kalman_filter", "lapjv", "matching", "pipeline", "track"]
"""Constant-velocity Kalman filter over boxes in (center x, center y, aspect, height) space."""

from __future__ import annotations

from typing import ClassVar, Sequence

import numpy as np

_NDIM = 4


class KalmanFilter:
    """Kalman filter with an 8-dimensional state (x, y, a, h, vx, vy, va, vh).

    The measurement is the 4-dimensional box (x, y, a, h). Measurement noise is
    scaled by ``1 - score`` (NSA Kalman filter).
    """

    chi2inv95: ClassVar[tuple[float, ...]] = (
        0.0,
        3.8415,
        5.9915,
        7.8147,
        9.4877,
        11.070,
        12.592,
        14.067,
        15.507,
        16.919,
    )

    def __init__(self) -> None:
        dt = 1.0
        self._motion_mat = np.eye(2 * _NDIM)
        for i in range(_NDIM):
            self._motion_mat[i, _NDIM + i] = dt
        self._update_mat = np.eye(_NDIM, 2 * _NDIM)
        self._std_weight_position = 1.0 / 20.0
        self._std_weight_velocity = 1.0 / 160.0

    def initiate(self, measurement: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
        """Create a track state from an unassociated (x, y, a, h) measurement."""
        measurement = np.asarray(measurement, dtype=float)
        mean = np.concatenate([measurement, np.zeros(_NDIM)])
        height = measurement[3]
        pos = 2 * self._std_weight_position * height
        vel = 10 * self._std_weight_velocity * height
        std = np.array([pos, pos, 1e-2, pos, vel, vel, 1e-5, vel])
        return mean, np.diag(np.square(std))

    def predict(self, mean: np.ndarray, covariance: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Run the prediction step; returns the predicted mean and covariance."""
        mean = np.asarray(mean, dtype=float)
        covariance = np.asarray(covariance, dtype=float)
        height = mean[3]
        pos = self._std_weight_position * height
        vel = self._std_weight_velocity * height
        std = np.array([pos, pos, 1e-2, pos, vel, vel, 1e-5, vel])
        motion_cov = np.diag(np.square(std))
        new_mean = self._motion_mat @ mean
        new_cov = self._motion_mat @ covariance @ self._motion_mat.T + motion_cov
        return new_mean, new_cov

    def project(
        self, mean: np.ndarray, covariance: np.ndarray, score: float = 0.0
    ) -> tuple[np.ndarray, np.ndarray]:
        """Project the state distribution into measurement space."""
        mean = np.asarray(mean, dtype=float)
        covariance = np.asarray(covariance, dtype=float)
        pos = self._std_weight_position * mean[3]
        std = (1 - score) * np.array([pos, pos, 1e-1, pos])
        projected_mean = self._update_mat @ mean
        projected_cov = self._update_mat @ covariance @ self._update_mat.T
        return projected_mean, projected_cov + np.diag(np.square(std))

    def update(
        self,
        mean: np.ndarray,
        covariance: np.ndarray,
        measurement: Sequence[float],
        score: float = 0.0,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Run the correction step with a measurement of the given detection score."""
        mean = np.asarray(mean, dtype=float)
        covariance = np.asarray(covariance, dtype=float)
        projected_mean, projected_cov = self.project(mean, covariance, score)

        chol = np.linalg.cholesky(projected_cov)
        b = (covariance @ self._update_mat.T).T
        kalman_gain = np.linalg.solve(chol.T, np.linalg.solve(chol, b)).T

        innovation = np.asarray(measurement, dtype=float) - projected_mean
        new_mean = mean + innovation @ kalman_gain.T
        new_cov = covariance - kalman_gain @ projected_cov @ kalman_gain.T
        return new_mean, new_cov

    def gating_distance(
        self,
        mean: np.ndarray,
        covariance: np.ndarray,
        measurements: Sequence[Sequence[float]],
        only_position: bool = False,
    ) -> np.ndarray:
        """Squared distance of each measurement to the projected state."""
        if only_position:
            raise ValueError("position-only gating distance is not supported")
        projected_mean, projected_cov = self.project(mean, covariance)
        d = np.atleast_2d(np.asarray(measurements, dtype=float)) - projected_mean
        factor = np.linalg.cholesky(projected_cov)
        # Solves z @ L = d for z.
        z = np.linalg.solve(factor.T, d.T)
        return np.sum(z * z, axis=0)
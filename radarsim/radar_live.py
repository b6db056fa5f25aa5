from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class RadarState:
    x: float
    y: float
    range: float
    sweep_angle: float
    mode: str
    tracked_targets: Optional[Tuple] = None  # AircraftView snapshots; None in live mode


class LiveRadar:
    """
    Radar without target tracking. Only the range ring and the sweep line are
    simulated; consumers draw every aircraft from its live snapshot.
    """
    mode = "live"

    def __init__(self, cfg, rng=None):
        self.cfg = cfg
        self.x, self.y = cfg.RADAR_SITE_KM
        self.sweep_rate = cfg.RADAR_SWEEP_RATE_DPS
        self.sweep_angle = 0.0
        self.rng = rng if rng is not None else np.random.default_rng()
        self.set_range(cfg.RADAR_RANGE_KM)

    def set_range(self, km):
        self.range = float(np.clip(km, self.cfg.RADAR_MIN_RANGE_KM, self.cfg.RADAR_MAX_RANGE_KM))
        return self.range

    def update_sweep(self, dt):
        self.sweep_angle = (self.sweep_angle + self.sweep_rate * max(dt, 0.0)) % 360.0

    def detect(self, aircraft, now):
        """Live mode keeps no tracks."""

    def update(self, dt, aircraft, now):
        self.update_sweep(dt)
        self.detect(aircraft, now)

    def get_state(self):
        return RadarState(
            x=self.x, y=self.y, range=self.range,
            sweep_angle=self.sweep_angle, mode=self.mode,
        )

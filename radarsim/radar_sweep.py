import logging
from dataclasses import dataclass

from radarsim.kinematics import angle_diff, bearing_deg, distance_km
from radarsim.radar_live import LiveRadar, RadarState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    snapshot: object   # AircraftView at the moment of the last paint
    last_seen: float   # simulation time (s)


class SweepRadar(LiveRadar):
    """
    Rotating radar that paints a target only while the beam is on it, with a
    detection probability that falls off with range. A painted target persists
    for one full rotation, so it stays visible until the beam comes round again.
    """
    mode = "sweep"

    def __init__(self, cfg, rng=None):
        super().__init__(cfg, rng)
        self.beam_width = cfg.RADAR_BEAM_WIDTH_DEG
        self.flicker_rate = cfg.RADAR_FLICKER_RATE
        self.tracks = {}  # aircraft id -> Track

    @property
    def persistence_time(self):
        return 360.0 / self.sweep_rate

    def detection_probability(self, distance):
        """Probability of a paint for a target in the beam at this distance (km)."""
        if distance > self.range:
            return 0.0
        snr = max(0.0, 1.0 - distance / self.range)
        return snr * (1.0 - self.flicker_rate)

    def in_beam(self, bearing):
        return abs(angle_diff(bearing, self.sweep_angle)) <= self.beam_width / 2.0

    def detect(self, aircraft, now):
        """
        Update the track map for one tick.

        Args:
            aircraft: AircraftView snapshots of every aircraft in the registry
            now: Current simulation time in seconds
        """
        # === PERSISTENCE ===
        # Drop targets that have not been painted for a full rotation
        for uid in [uid for uid, t in self.tracks.items() if now - t.last_seen > self.persistence_time]:
            del self.tracks[uid]

        present = set()
        for ac in aircraft:
            present.add(ac.id)
            dist = distance_km(self.x, self.y, ac.x, ac.y)

            # Out of range: gone immediately, regardless of persistence
            if dist > self.range:
                self.tracks.pop(ac.id, None)
                continue

            if not self.in_beam(bearing_deg(self.x, self.y, ac.x, ac.y)):
                continue

            if self.rng.random() < self.detection_probability(dist):
                self.tracks[ac.id] = Track(snapshot=ac, last_seen=now)

        # Aircraft removed from the simulation
        for uid in [uid for uid in self.tracks if uid not in present]:
            del self.tracks[uid]

    def get_state(self):
        return RadarState(
            x=self.x, y=self.y, range=self.range,
            sweep_angle=self.sweep_angle, mode=self.mode,
            tracked_targets=tuple(t.snapshot for t in self.tracks.values()),
        )

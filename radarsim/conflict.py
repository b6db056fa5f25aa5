import logging
from dataclasses import dataclass

import numpy as np

from radarsim.kinematics import KNOTS_TO_KMS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conflict:
    id_a: int
    id_b: int
    time_to_approach: float      # seconds until closest point of approach
    distance_at_approach: float  # predicted planar separation at CPA (km)


def _state_arrays(aircraft):
    pos = np.array([[a.x, a.y] for a in aircraft], dtype=float)
    rad = np.radians([a.heading for a in aircraft])
    speed_kms = np.array([a.speed for a in aircraft], dtype=float) * KNOTS_TO_KMS
    # Navigational convention: x = East uses sin, y = North uses cos
    vel = np.stack([np.sin(rad) * speed_kms, np.cos(rad) * speed_kms], axis=1)
    alt = np.array([a.altitude for a in aircraft], dtype=float)
    return pos, vel, alt


def detect_conflicts(aircraft, lookahead_sec=300.0, lateral_sep_km=5.0, vertical_sep_ft=1000.0):
    """
    Find every pair of aircraft whose closest point of approach (CPA) violates
    separation within the lookahead window.

    Each pair is projected along straight-line velocities. Altitude is not
    projected: the vertical test uses current altitudes.

    Args:
        aircraft: Sequence of objects with uid/id, x, y, heading, speed, altitude
        lookahead_sec: Ignore CPAs further in the future than this
        lateral_sep_km: Planar separation minimum
        vertical_sep_ft: Vertical separation minimum

    Returns:
        list: Conflict entries, one per unordered pair, in no particular order
    """
    aircraft = list(aircraft)
    n = len(aircraft)
    if n < 2:
        return []

    # Accepts live Aircraft (uid) or AircraftView snapshots (id)
    ids = [a.uid if hasattr(a, "uid") else a.id for a in aircraft]
    pos, vel, alt = _state_arrays(aircraft)

    # Upper triangle: each unordered pair exactly once
    i, j = np.triu_indices(n, k=1)
    rel_pos = pos[j] - pos[i]
    rel_vel = vel[j] - vel[i]
    r2 = np.einsum("ij,ij->i", rel_vel, rel_vel)

    # Zero relative velocity never converges; leave tca at -1 so it is discarded
    moving = r2 > 0.0
    tca = np.full(len(i), -1.0)
    tca[moving] = -np.einsum("ij,ij->i", rel_pos[moving], rel_vel[moving]) / r2[moving]

    closest = rel_pos + rel_vel * tca[:, None]
    dist = np.hypot(closest[:, 0], closest[:, 1])
    alt_diff = np.abs(alt[j] - alt[i])

    hit = (
        moving
        & np.isfinite(tca) & np.isfinite(dist)
        & (tca >= 0.0) & (tca <= lookahead_sec)
        & (dist < lateral_sep_km)
        & (alt_diff < vertical_sep_ft)
    )

    return [
        Conflict(ids[a], ids[b], float(t), float(d))
        for a, b, t, d in zip(i[hit], j[hit], tca[hit], dist[hit])
    ]


def resolve_conflicts(conflicts, registry, cfg):
    """
    Evasive policy: both aircraft of each flagged pair turn 90 degrees off the
    bearing to the other and climb. Re-applied every tick while the conflict lasts.
    """
    for c in conflicts:
        a = registry.get(c.id_a)
        b = registry.get(c.id_b)
        if a is None or b is None:
            continue
        a.auto_resolve_conflict(b, cfg)
        b.auto_resolve_conflict(a, cfg)

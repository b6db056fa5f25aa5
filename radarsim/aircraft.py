import math
from collections import deque
from dataclasses import dataclass, field
from typing import Optional, Tuple

from radarsim import kinematics
from radarsim.commands import (
    HOLD, SET_ALTITUDE, SET_HEADING, SET_SPEED, VECTOR, CommandResult,
)

CATEGORIES = ("standard", "hypersonic")

# Behavioral tags
CRUISING = "cruising"
FOLLOWING_COMMAND = "following_command"
CLIMBING = "climbing"
DESCENDING = "descending"
HOLDING = "holding"
EVASIVE = "evasive"
TURNING_LIMITED = "turning_limited"


@dataclass(frozen=True)
class AircraftView:
    """Read-only snapshot of one aircraft, taken after a tick completes."""
    id: int
    callsign: str
    category: str
    x: float
    y: float
    heading: float
    speed: float
    altitude: float
    vertical_rate: float
    target_heading: float
    target_speed: float
    target_altitude: float
    waypoint: Optional[Tuple[float, float]]
    state: str
    trail: Tuple[Tuple[float, float], ...]
    is_hypersonic: bool = False
    mach: Optional[float] = None


@dataclass
class Aircraft:
    """
    A single aircraft in the simulation.
    Owned by the Simulation registry; everything else sees AircraftView snapshots.
    """
    # Identification
    uid: int
    callsign: str
    category: str            # "standard" or "hypersonic"
    profile: dict            # Performance profile (see Config.AIRCRAFT_PROFILES)

    # Kinematic state
    x: float                 # km East of the radar site
    y: float                 # km North of the radar site
    heading: float           # degrees, 0 = North, clockwise
    speed: float             # knots
    altitude: float          # feet
    vertical_rate: float = 0.0  # ft/min, derived each tick

    # Control state (None = hold the current value)
    target_heading: float = None
    target_speed: float = None
    target_altitude: float = None
    waypoint: Optional[Tuple[float, float]] = None
    state: str = CRUISING

    # Trail: oldest first, distance-decimated
    trail_dot_km: float = 2.0
    max_trail_dots: int = 10
    trail: deque = field(default_factory=deque)
    last_trail_drop: Tuple[float, float] = None

    def __post_init__(self):
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown aircraft category: {self.category}")
        self.heading %= 360.0
        if self.target_heading is None:
            self.target_heading = self.heading
        if self.target_speed is None:
            self.target_speed = self.speed
        if self.target_altitude is None:
            self.target_altitude = self.altitude
        self.trail = deque(self.trail, maxlen=self.max_trail_dots)
        if self.last_trail_drop is None:
            self.last_trail_drop = (self.x, self.y)

    def update(self, dt, wind=(0.0, 0.0)):
        """Advance this aircraft by dt seconds toward its targets."""
        new = kinematics.step_kinematics(
            {"x": self.x, "y": self.y, "heading": self.heading,
             "speed": self.speed, "altitude": self.altitude},
            {"heading": self.target_heading, "speed": self.target_speed,
             "altitude": self.target_altitude},
            self.profile, dt, wind,
        )
        if not all(math.isfinite(v) for v in new.values()):
            return

        self.x, self.y = new["x"], new["y"]
        self.heading = new["heading"]
        self.speed = new["speed"]
        self.altitude = new["altitude"]
        self.vertical_rate = new["vertical_rate"]

        # Drop a trail dot once we have flown far enough from the last one
        lx, ly = self.last_trail_drop
        if kinematics.distance_km(lx, ly, self.x, self.y) >= self.trail_dot_km:
            self.trail.append((self.x, self.y))
            self.last_trail_drop = (self.x, self.y)

    def auto_resolve_conflict(self, other, cfg):
        """Evasive maneuver: turn perpendicular to the intruder's bearing and climb."""
        brg = kinematics.bearing_deg(self.x, self.y, other.x, other.y)
        self.target_heading = (brg + cfg.EVASIVE_HEADING_OFFSET_DEG) % 360.0
        self.target_altitude = self.altitude + cfg.EVASIVE_CLIMB_FT
        self.state = EVASIVE

    def to_view(self, cfg):
        extras = CAPABILITIES[self.category]["display"](self, cfg)
        return AircraftView(
            id=self.uid, callsign=self.callsign, category=self.category,
            x=self.x, y=self.y, heading=self.heading, speed=self.speed,
            altitude=self.altitude, vertical_rate=self.vertical_rate,
            target_heading=self.target_heading, target_speed=self.target_speed,
            target_altitude=self.target_altitude, waypoint=self.waypoint,
            state=self.state, trail=tuple(self.trail), **extras,
        )


# === COMMAND APPLICATION ===
def _apply_standard(ac, command, cfg):
    params = command.params
    if command.kind == SET_HEADING:
        ac.target_heading = params["heading"] % 360.0
        ac.state = FOLLOWING_COMMAND
    elif command.kind == SET_ALTITUDE:
        ac.target_altitude = params["altitude"]
        if params["altitude"] > ac.altitude:
            ac.state = CLIMBING
        elif params["altitude"] < ac.altitude:
            ac.state = DESCENDING
        else:
            ac.state = FOLLOWING_COMMAND
    elif command.kind == SET_SPEED:
        ac.target_speed = params["speed"]
    elif command.kind == HOLD:
        ac.target_heading = ac.heading
        ac.target_speed = ac.speed
        ac.target_altitude = ac.altitude
        ac.state = HOLDING
    elif command.kind == VECTOR:
        ac.waypoint = (params["x"], params["y"])
        ac.state = FOLLOWING_COMMAND
    else:
        return CommandResult.rejected(f"unsupported command: {command.kind}", command)
    return CommandResult.accept(command)


def _apply_hypersonic_heading(ac, command, cfg):
    # Large heading changes at supersonic speed are limited to a partial turn
    diff = kinematics.angle_diff(command.params["heading"], ac.heading)
    if ac.speed > cfg.SUPERSONIC_THRESHOLD_KTS and abs(diff) > cfg.HYPERSONIC_MAX_TURN_DEG:
        ac.target_heading = (ac.heading + math.copysign(cfg.HYPERSONIC_MAX_TURN_DEG, diff)) % 360.0
        ac.state = TURNING_LIMITED
        return CommandResult.accept(command, note="Partial turn due to hypersonic limits", partial=True)
    return _apply_standard(ac, command, cfg)


def _no_display_extras(ac, cfg):
    return {}


def _hypersonic_display_extras(ac, cfg):
    return {"is_hypersonic": True, "mach": round(ac.speed / cfg.MACH_KTS, 2)}


# Category -> capabilities. Only the hypersonic heading path differs.
CAPABILITIES = {
    "standard": {
        "heading": _apply_standard,
        "other": _apply_standard,
        "display": _no_display_extras,
    },
    "hypersonic": {
        "heading": _apply_hypersonic_heading,
        "other": _apply_standard,
        "display": _hypersonic_display_extras,
    },
}


def apply_command(ac, command, cfg):
    """Apply an absolute (already resolved) command to an aircraft."""
    capability = "heading" if command.kind == SET_HEADING else "other"
    return CAPABILITIES[ac.category][capability](ac, command, cfg)

import math

import numpy as np

KNOTS_TO_KMS = 0.000514444   # 1 knot in kilometers per second


# === CARTESIAN MATH HELPERS ===
def distance_km(x1, y1, x2, y2):
    """Euclidean distance between two points in the plane."""
    return math.hypot(x2 - x1, y2 - y1)


def bearing_deg(x1, y1, x2, y2):
    """
    Navigational bearing from point 1 to point 2 in degrees.
    0 = North (+Y), 90 = East (+X).
    """
    return math.degrees(math.atan2(x2 - x1, y2 - y1)) % 360.0


def angle_diff(target, current):
    """Signed shortest rotation from current to target, in [-180, 180)."""
    return ((target - current + 540.0) % 360.0) - 180.0


def velocity_kms(heading, speed_kts):
    """Velocity vector (vx, vy) in km/s for a navigational heading."""
    rad = math.radians(heading)
    speed_kms = speed_kts * KNOTS_TO_KMS
    return math.sin(rad) * speed_kms, math.cos(rad) * speed_kms


# === CONTROLLERS ===
def compute_turn(heading, target_heading, dt, turn_rate):
    """
    Turn toward the target heading along the shortest arc.

    Args:
        heading: Current heading in degrees
        target_heading: Commanded heading in degrees
        dt: Timestep in seconds
        turn_rate: Maximum turn rate in degrees per second

    Returns:
        float: New heading in [0, 360)
    """
    target = target_heading % 360.0
    d = angle_diff(target, heading)
    max_turn = turn_rate * max(dt, 0.0)
    if abs(d) <= max_turn:
        return target
    return (heading + math.copysign(max_turn, d)) % 360.0


def compute_speed_change(speed, target_speed, dt, accel, decel):
    """Rate-limited approach to the target speed (knots)."""
    diff = target_speed - speed
    rate = accel if diff > 0 else decel
    max_change = rate * max(dt, 0.0)
    if abs(diff) <= max_change:
        return max(float(target_speed), 0.0)
    return max(speed + float(np.sign(diff)) * max_change, 0.0)


def compute_altitude_change(altitude, target_altitude, dt, max_climb_fpm):
    """Rate-limited climb or descent toward the target altitude (feet)."""
    diff = target_altitude - altitude
    # Climb performance is symmetric up and down
    max_change = max_climb_fpm / 60.0 * max(dt, 0.0)
    if abs(diff) <= max_change:
        return max(float(target_altitude), 0.0)
    return max(altitude + float(np.sign(diff)) * max_change, 0.0)


def vertical_rate_fpm(old_altitude, new_altitude, dt):
    if dt <= 0:
        return 0.0
    return (new_altitude - old_altitude) / (dt / 60.0)


# === INTEGRATION ===
def integrate_position(x, y, heading, speed_kts, dt, wind_speed_kts=0.0, wind_dir_deg=0.0):
    """
    Forward-Euler position update with a uniform wind.

    Heading and wind direction are both navigational, so the x component uses
    sin and the y component uses cos. Discretization error grows with speed * dt,
    which matters for hypersonic traffic at coarse timesteps.

    Returns:
        tuple: New (x, y) in km
    """
    dt = max(dt, 0.0)
    vx, vy = velocity_kms(heading, speed_kts)
    if wind_speed_kts > 0:
        wx, wy = velocity_kms(wind_dir_deg, wind_speed_kts)
        vx += wx
        vy += wy
    return x + vx * dt, y + vy * dt


def step_kinematics(state, target, profile, dt, wind=(0.0, 0.0)):
    """
    Advance one aircraft by dt without mutating anything.

    Args:
        state: Dict with x, y, heading, speed, altitude
        target: Dict with heading, speed, altitude
        profile: Performance profile dict (see Config.AIRCRAFT_PROFILES)
        dt: Timestep in seconds
        wind: (speed_kts, dir_deg)

    Returns:
        dict: New x, y, heading, speed, altitude and vertical_rate
    """
    heading = compute_turn(state["heading"], target["heading"], dt, profile["turn_rate_deg_per_sec"])
    speed = compute_speed_change(
        state["speed"], target["speed"], dt,
        profile["accel_kts_per_sec"], profile["decel_kts_per_sec"],
    )
    altitude = compute_altitude_change(state["altitude"], target["altitude"], dt, profile["max_climb_fpm"])

    # Position uses the post-turn heading and post-acceleration speed
    x, y = integrate_position(state["x"], state["y"], heading, speed, dt, wind[0], wind[1])

    return {
        "x": x,
        "y": y,
        "heading": heading,
        "speed": speed,
        "altitude": altitude,
        "vertical_rate": vertical_rate_fpm(state["altitude"], altitude, dt),
    }

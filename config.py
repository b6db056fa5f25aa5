class Config:
    # --- Simulation ---
    PHYSICS_STEP = 1.0 / 30.0    # Fixed physics timestep (30 Hz)
    MAX_FRAME_TIME = 0.25        # Cap on wall time accumulated per frame (seconds)
    SEED = None                  # None = nondeterministic; set an int for repeatable runs

    # --- Aircraft Performance Profiles ---
    # Speeds in knots, rates per second except climb (feet per minute)
    AIRCRAFT_PROFILES = {
        "standard": {
            "max_speed_kts": 600.0,
            "accel_kts_per_sec": 50.0,
            "decel_kts_per_sec": 50.0,
            "max_climb_fpm": 4000.0,
            "turn_rate_deg_per_sec": 3.0,
        },
        "hypersonic": {
            "max_speed_kts": 15000.0,
            "accel_kts_per_sec": 2000.0,
            "decel_kts_per_sec": 2000.0,
            "max_climb_fpm": 15000.0,
            "turn_rate_deg_per_sec": 0.5,
        },
    }
    CALLSIGN_PREFIX = {"standard": "AC", "hypersonic": "HX"}

    # --- Trails ---
    TRAIL_DOT_DISTANCE_KM = 2.0  # Distance flown before a new trail dot is dropped
    MAX_TRAIL_DOTS = 10

    # --- Spawning ---
    # Spawn box in km relative to the radar site (Min X, Max X, Min Y, Max Y)
    SPAWN_LIMITS = (-70.0, 70.0, -70.0, 70.0)
    SPAWN_SPEED_KTS = {"standard": (200.0, 550.0), "hypersonic": (4000.0, 4000.0)}
    SPAWN_ALTITUDE_FT = (3000.0, 9500.0)
    STARTER_AIRCRAFT = 6         # First one is hypersonic

    # --- Environment ---
    WIND_SPEED_KTS = 0.0
    WIND_DIR_DEG = 0.0           # Navigational bearing the air mass moves toward

    # --- Conflict Detection ---
    CONFLICT_LOOKAHEAD_SEC = 300.0
    LATERAL_SEPARATION_KM = 5.0
    VERTICAL_SEPARATION_FT = 1000.0
    # Evasive resolution: turn perpendicular to the intruder and climb
    EVASIVE_HEADING_OFFSET_DEG = 90.0
    EVASIVE_CLIMB_FT = 2000.0

    # --- Radar ---
    # Detection strategy: 'sweep' (probabilistic, persistent tracks) or 'live' (no tracking)
    RADAR_MODE = 'sweep'
    RADAR_SITE_KM = (0.0, 0.0)
    RADAR_RANGE_KM = 100.0
    RADAR_MIN_RANGE_KM = 50.0
    RADAR_MAX_RANGE_KM = 500.0
    RADAR_SWEEP_RATE_DPS = 90.0
    RADAR_BEAM_WIDTH_DEG = 30.0
    RADAR_FLICKER_RATE = 0.02    # Fraction of paints lost to clutter

    # --- Commands ---
    ALTITUDE_CEILING_FT = 100000.0   # Not enforced for hypersonic aircraft
    SPEED_LIMIT_FACTOR = 1.2         # Max commanded speed as a multiple of profile max
    SUPERSONIC_THRESHOLD_KTS = 660.0
    HYPERSONIC_MAX_TURN_DEG = 30.0   # Largest heading change accepted above the threshold
    MACH_KTS = 661.5

    # --- Operator Interface ---
    LOG_CAPACITY = 500
    SELECT_RADIUS_KM = 5.0
    LOG_LEVEL = "INFO"

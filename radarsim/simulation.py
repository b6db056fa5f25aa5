import logging

import numpy as np

from config import Config
from radarsim.aircraft import Aircraft
from radarsim.commands import (
    CommandError, CommandResult, ParseError, dispatch_command, parse_command, validate_command,
)
from radarsim.conflict import detect_conflicts, resolve_conflicts
from radarsim.kinematics import distance_km
from radarsim.radar import make_radar
from radarsim.utils.logger import MessageLog
from radarsim.utils.map_limits import MapLimits

logger = logging.getLogger(__name__)


class Simulation:
    """
    Core simulation engine: owns every aircraft, runs the fixed-step physics
    tick, detects and resolves conflicts, sweeps the radar and applies
    controller commands.

    All mutation happens inside tick() or synchronously in the inbound calls
    (add/remove/submit_command/set_*). Outbound calls return frozen snapshots.
    """

    def __init__(self, cfg=Config, seed=None, radar_mode=None, populate=False):
        """
        Args:
            cfg: Configuration class (subclass Config to override values)
            seed: Seed for spawning and radar draws; defaults to cfg.SEED
            radar_mode: 'sweep' or 'live'; defaults to cfg.RADAR_MODE
            populate: Spawn cfg.STARTER_AIRCRAFT aircraft on creation
        """
        self.cfg = cfg
        self.seed = cfg.SEED if seed is None else seed

        # Independent streams so adding traffic does not perturb radar draws
        spawn_seq, radar_seq = np.random.SeedSequence(self.seed).spawn(2)
        self.spawn_rng = np.random.default_rng(spawn_seq)
        self.radar_rng = np.random.default_rng(radar_seq)

        self.aircraft = {}            # uid -> Aircraft
        self.callsign_index = {}      # upper-case callsign -> uid
        self.next_uid = 1
        self.callsign_counter = 0

        self.time = 0.0               # simulation seconds since start
        self.step = cfg.PHYSICS_STEP
        self.accumulator = 0.0
        self.tick_count = 0
        self.is_running = False

        self.wind = (cfg.WIND_SPEED_KTS, cfg.WIND_DIR_DEG)
        self.spawn_limits = MapLimits(*cfg.SPAWN_LIMITS)
        self.radar = make_radar(radar_mode, cfg, self.radar_rng)

        self.conflicts = ()
        self.metrics = {"near_miss": 0, "commands": 0, "rejected": 0}
        self.log = MessageLog(cfg.LOG_CAPACITY, logger)
        self.selected_id = None

        if populate:
            self.populate()

    # === REGISTRY ===
    def populate(self, count=None):
        count = self.cfg.STARTER_AIRCRAFT if count is None else count
        for i in range(count):
            self.add_aircraft("hypersonic" if i == 0 else "standard")

    def _next_callsign(self, category):
        prefix = self.cfg.CALLSIGN_PREFIX[category]
        while True:
            self.callsign_counter += 1
            callsign = f"{prefix}{100 + self.callsign_counter}"
            if callsign.upper() not in self.callsign_index:
                return callsign

    def spawn(self, category, x, y, heading, speed, altitude, callsign=None):
        """
        Create an aircraft at an explicit state.

        Returns:
            int: The unique ID assigned to the aircraft
        """
        if category not in self.cfg.AIRCRAFT_PROFILES:
            raise ValueError(f"Unknown aircraft category: {category}")
        callsign = callsign or self._next_callsign(category)
        key = callsign.upper()
        if key in self.callsign_index:
            raise ValueError(f"Callsign already in use: {callsign}")

        ac = Aircraft(
            uid=self.next_uid, callsign=callsign, category=category,
            profile=self.cfg.AIRCRAFT_PROFILES[category],
            x=x, y=y, heading=heading, speed=speed, altitude=altitude,
            trail_dot_km=self.cfg.TRAIL_DOT_DISTANCE_KM,
            max_trail_dots=self.cfg.MAX_TRAIL_DOTS,
        )
        self.aircraft[ac.uid] = ac
        self.callsign_index[key] = ac.uid
        self.next_uid += 1
        self.log.log(self.time, f"ADDED {callsign}")
        return ac.uid

    def add_aircraft(self, category="standard"):
        """Spawn an aircraft with a random position, heading, speed and altitude."""
        if category not in self.cfg.AIRCRAFT_PROFILES:
            raise ValueError(f"Unknown aircraft category: {category}")
        rng = self.spawn_rng
        x, y = self.spawn_limits.random_position(rng)
        speed_lo, speed_hi = self.cfg.SPAWN_SPEED_KTS[category]
        alt_lo, alt_hi = self.cfg.SPAWN_ALTITUDE_FT
        return self.spawn(
            category, x, y,
            heading=float(rng.uniform(0.0, 360.0)),
            speed=float(rng.uniform(speed_lo, speed_hi)),
            altitude=float(rng.uniform(alt_lo, alt_hi)),
        )

    def remove_aircraft(self, aircraft_id=None):
        """
        Remove an aircraft by id; with no id, remove the selected aircraft,
        or the most recently added one if nothing is selected.

        Returns:
            int or None: The removed id, None if the registry was empty

        Raises:
            KeyError: aircraft_id is not in the registry.
        """
        if aircraft_id is None:
            aircraft_id = self.selected_id
        if aircraft_id is None:
            if not self.aircraft:
                return None
            aircraft_id = max(self.aircraft)
        if aircraft_id not in self.aircraft:
            raise KeyError(f"No aircraft with id {aircraft_id}")

        ac = self.aircraft.pop(aircraft_id)
        self.callsign_index.pop(ac.callsign.upper(), None)
        if self.selected_id == aircraft_id:
            self.selected_id = None
        self.conflicts = tuple(c for c in self.conflicts if aircraft_id not in (c.id_a, c.id_b))
        self.log.log(self.time, f"REMOVED {ac.callsign}")
        return aircraft_id

    def get_aircraft(self, aircraft_id):
        return self.aircraft.get(aircraft_id)

    def get_aircraft_by_callsign(self, callsign):
        if not callsign:
            return None
        uid = self.callsign_index.get(callsign.upper())
        return self.aircraft.get(uid) if uid is not None else None

    # === SELECTION ===
    def select_by_callsign(self, callsign):
        ac = self.get_aircraft_by_callsign(callsign)
        if ac is not None:
            self.selected_id = ac.uid
        return self.selected_id

    def select_by_position(self, x, y):
        """Select the nearest aircraft within SELECT_RADIUS_KM, else clear the selection."""
        best, best_d = None, float("inf")
        for ac in self.aircraft.values():
            d = distance_km(ac.x, ac.y, x, y)
            if d < best_d:
                best, best_d = ac, d
        self.selected_id = best.uid if best is not None and best_d < self.cfg.SELECT_RADIUS_KM else None
        return self.selected_id

    def get_selected(self):
        ac = self.aircraft.get(self.selected_id)
        return ac.to_view(self.cfg) if ac is not None else None

    # === CONFIGURATION ===
    def set_radar_range(self, km):
        return self.radar.set_range(km)

    def set_wind(self, speed_kts, dir_deg):
        self.wind = (max(float(speed_kts), 0.0), float(dir_deg) % 360.0)
        return self.wind

    # === COMMANDS ===
    def submit_command(self, raw):
        """
        Parse, validate and dispatch one command line.

        Returns:
            tuple: One CommandResult per chained command, or a single rejected
            result if the line does not parse. Nothing is raised to the caller.
        """
        try:
            callsign, commands = parse_command(raw)
        except ParseError as e:
            self.metrics["rejected"] += 1
            self.log.log(self.time, f"CMD_PARSE_ERR: {e.reason}", logging.WARNING)
            return (CommandResult.rejected(e.reason),)

        results = []
        for command in commands:
            try:
                ac = validate_command(command, self.get_aircraft_by_callsign, self.cfg)
            except CommandError as e:
                # Reported, then carry on with the rest of the chain
                self.metrics["rejected"] += 1
                self.log.log(self.time, f"CMD_INVALID: {e.reason}", logging.WARNING)
                results.append(CommandResult.rejected(e.reason, command))
                continue

            result = dispatch_command(command, ac, self.cfg)
            self.log.log(self.time, f"CMD_DISPATCH {command.kind} -> {ac.callsign}")
            if result.note:
                self.log.log(self.time, f"{ac.callsign}: {result.note}")
            self.metrics["commands"] += 1
            results.append(result)

        self.log.log(self.time, f"CMD_OK: {raw.strip()}")
        return tuple(results)

    # === LOOP ===
    def start(self):
        self.is_running = True

    def pause(self):
        self.is_running = False

    def toggle_running(self):
        self.is_running = not self.is_running
        return self.is_running

    def advance(self, elapsed):
        """
        Feed wall-clock time into the fixed-step accumulator and run as many
        physics ticks as it holds. Leftover time carries to the next call.

        Returns:
            int: Number of ticks executed
        """
        self.accumulator += min(max(elapsed, 0.0), self.cfg.MAX_FRAME_TIME)
        ticks = 0
        while self.accumulator >= self.step:
            self.tick(self.step)
            self.accumulator -= self.step
            ticks += 1
        return ticks

    def tick(self, dt=None):
        """One atomic physics step: aircraft, conflicts, radar."""
        dt = self.step if dt is None else dt

        # === AIRCRAFT ===
        for ac in self.aircraft.values():
            ac.update(dt, self.wind)

        # === CONFLICTS ===
        conflicts = detect_conflicts(
            self.aircraft.values(),
            lookahead_sec=self.cfg.CONFLICT_LOOKAHEAD_SEC,
            lateral_sep_km=self.cfg.LATERAL_SEPARATION_KM,
            vertical_sep_ft=self.cfg.VERTICAL_SEPARATION_FT,
        )
        for c in conflicts:
            self.metrics["near_miss"] += 1
            a, b = self.aircraft[c.id_a], self.aircraft[c.id_b]
            self.log.log(
                self.time,
                f"CONFLICT between {a.callsign} and {b.callsign} ttc:{c.time_to_approach:.2f}s",
                logging.DEBUG,
            )
        resolve_conflicts(conflicts, self.aircraft, self.cfg)
        self.conflicts = tuple(conflicts)

        # === RADAR ===
        self.time += dt
        self.tick_count += 1
        self.radar.update(dt, self.list_aircraft_display_data(), self.time)

    # === SNAPSHOTS ===
    def list_aircraft_display_data(self):
        return tuple(self.aircraft[uid].to_view(self.cfg) for uid in sorted(self.aircraft))

    def get_radar_state(self):
        return self.radar.get_state()

    def get_conflicts(self):
        return self.conflicts

    def get_metrics(self):
        return dict(self.metrics)

    def get_log(self, n=None):
        return self.log.recent(n)

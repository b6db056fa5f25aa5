"""
Controller command language.

A command line names one aircraft and chains one or more clearances:

    <CALLSIGN> <VERB> [<PARAM>] [<VERB> [<PARAM>] ...]

    H ddd      fly heading ddd (000-360)
    C ddd      fly heading ddd (3 digits)
    C d | dd   climb/descend to d or dd thousand feet
    S n        set speed to n knots
    L n | R n  turn left/right by n degrees
    HOLD       hold present heading, speed and altitude
    V x,y      vector to waypoint (km from the radar site)

Parsing is all-or-nothing for a line. Validation and dispatch are per command,
so one rejected clearance does not stop the ones chained after it.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Command kinds
SET_HEADING = "set_heading"
RELATIVE_HEADING = "relative_heading"
SET_ALTITUDE = "set_altitude"
SET_SPEED = "set_speed"
HOLD = "hold"
VECTOR = "vector"

HEADING_RE = re.compile(r"^\d{3}$")
ALTITUDE_RE = re.compile(r"^\d{1,2}$")
SPEED_RE = re.compile(r"^\d+(\.\d+)?$")
TURN_RE = re.compile(r"^\d{1,3}$")
WAYPOINT_RE = re.compile(r"^(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)$")


class CommandError(Exception):
    """Base class for rejected commands. `reason` is the operator-facing text."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class ParseError(CommandError):
    pass


class ValidationError(CommandError):
    pass


class UnknownCallsignError(ValidationError, LookupError):
    def __init__(self, callsign):
        super().__init__("unknown callsign")
        self.callsign = callsign


@dataclass(frozen=True)
class Command:
    callsign: str
    kind: str
    params: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    accepted: bool = False
    partial: bool = False
    reason: Optional[str] = None
    note: Optional[str] = None
    callsign: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def rejected(cls, reason, command=None, callsign=None):
        return cls(
            ok=False,
            reason=reason,
            callsign=command.callsign if command else callsign,
            kind=command.kind if command else None,
        )

    @classmethod
    def accept(cls, command, note=None, partial=False):
        return cls(
            ok=True, accepted=True, partial=partial, note=note,
            callsign=command.callsign, kind=command.kind,
        )


# === PARSER ===
def _param(tokens, i, verb):
    if i >= len(tokens):
        raise ParseError(f"Expected parameter for '{verb}'")
    return tokens[i]


def _parse_heading_token(token, verb):
    heading = int(token)
    if heading > 360:
        raise ParseError(f"Invalid heading for '{verb}': {token}")
    return float(heading % 360)


def _parse_heading(tokens, i):
    token = _param(tokens, i, "H")
    if not HEADING_RE.match(token):
        raise ParseError(f"Invalid parameter for 'H': {token}")
    return SET_HEADING, {"heading": _parse_heading_token(token, "H")}, i + 1


def _parse_clearance(tokens, i):
    token = _param(tokens, i, "C")
    if HEADING_RE.match(token):
        return SET_HEADING, {"heading": _parse_heading_token(token, "C")}, i + 1
    if ALTITUDE_RE.match(token):
        return SET_ALTITUDE, {"altitude": float(token) * 1000.0}, i + 1
    raise ParseError(f"Invalid parameter for 'C': {token}")


def _parse_speed(tokens, i):
    token = _param(tokens, i, "S")
    if not SPEED_RE.match(token):
        raise ParseError(f"Invalid parameter for 'S': {token}")
    return SET_SPEED, {"speed": float(token)}, i + 1


def _parse_turn(verb, sign):
    def parse(tokens, i):
        token = _param(tokens, i, verb)
        if not TURN_RE.match(token) or int(token) > 360:
            raise ParseError(f"Invalid parameter for '{verb}': {token}")
        return RELATIVE_HEADING, {"delta": sign * float(token)}, i + 1
    return parse


def _parse_hold(tokens, i):
    return HOLD, {}, i


def _parse_vector(tokens, i):
    token = _param(tokens, i, "V")
    m = WAYPOINT_RE.match(token)
    if not m:
        raise ParseError(f"Invalid parameter for 'V': {token}")
    return VECTOR, {"x": float(m.group(1)), "y": float(m.group(2))}, i + 1


# Verb -> parser(tokens, index) -> (kind, params, next_index)
VERBS = {
    "H": _parse_heading,
    "C": _parse_clearance,
    "S": _parse_speed,
    "L": _parse_turn("L", -1.0),
    "R": _parse_turn("R", 1.0),
    "HOLD": _parse_hold,
    "V": _parse_vector,
}


def parse_command(raw) -> Tuple[str, List[Command]]:
    """
    Parse one command line.

    Args:
        raw: Text such as "AC101 C 090 C 12 S 250"

    Returns:
        tuple: (callsign, [Command, ...]) with the callsign upper-cased

    Raises:
        ParseError: Empty line, missing verb, unknown verb or bad parameter.
    """
    if not raw or not isinstance(raw, str) or not raw.strip():
        raise ParseError("Empty command")

    tokens = raw.strip().upper().split()
    if len(tokens) < 2:
        raise ParseError("Incomplete command. Expected: <callsign> <verb> [params]")

    callsign = tokens[0]
    commands = []
    i = 1
    while i < len(tokens):
        verb = tokens[i]
        parser = VERBS.get(verb)
        if parser is None:
            raise ParseError(f"Unknown command verb: {verb}")
        kind, params, i = parser(tokens, i + 1)
        commands.append(Command(callsign=callsign, kind=kind, params=params))

    return callsign, commands


# === VALIDATION ===
def validate_command(command, lookup: Callable, cfg):
    """
    Check a parsed command against the current traffic picture.

    Args:
        command: Parsed Command
        lookup: Callable mapping a callsign to an Aircraft or None
        cfg: Configuration class

    Returns:
        Aircraft: The addressed aircraft

    Raises:
        UnknownCallsignError: No aircraft with that callsign.
        ValidationError: Clearance outside the aircraft's limits.
    """
    ac = lookup(command.callsign)
    if ac is None:
        raise UnknownCallsignError(command.callsign)

    if command.kind == SET_ALTITUDE and ac.category != "hypersonic":
        if command.params["altitude"] > cfg.ALTITUDE_CEILING_FT:
            raise ValidationError("altitude too high")

    if command.kind == SET_SPEED:
        if command.params["speed"] > ac.profile["max_speed_kts"] * cfg.SPEED_LIMIT_FACTOR:
            raise ValidationError("speed exceeds limits")

    return ac


# === DISPATCH ===
def resolve_relative_heading(command, heading):
    """Turn a relative_heading command into an absolute set_heading."""
    if command.kind != RELATIVE_HEADING:
        return command
    absolute = (heading + command.params["delta"]) % 360.0
    return replace(command, kind=SET_HEADING, params={"heading": absolute})


def dispatch_command(command, ac, cfg) -> CommandResult:
    # Imported here: aircraft depends on this module for Command/CommandResult
    from radarsim.aircraft import apply_command

    command = resolve_relative_heading(command, ac.heading)
    result = apply_command(ac, command, cfg)
    logger.debug("Dispatched %s -> %s (%s)", command.kind, ac.callsign, command.params)
    return result

import unittest

from config import Config
from radarsim.aircraft import CLIMBING, DESCENDING, FOLLOWING_COMMAND, HOLDING
from radarsim.commands import (
    HOLD, RELATIVE_HEADING, SET_ALTITUDE, SET_HEADING, SET_SPEED, VECTOR,
    Command, ParseError, UnknownCallsignError, ValidationError,
    parse_command, resolve_relative_heading, validate_command,
)
from radarsim.simulation import Simulation


class TestParser(unittest.TestCase):
    def test_heading(self):
        callsign, commands = parse_command("AC101 H 090")
        self.assertEqual(callsign, "AC101")
        self.assertEqual(commands, [Command("AC101", SET_HEADING, {"heading": 90.0})])

    def test_clearance_altitude(self):
        _, commands = parse_command("AC101 C 12")
        self.assertEqual(commands, [Command("AC101", SET_ALTITUDE, {"altitude": 12000.0})])

    def test_clearance_heading(self):
        _, commands = parse_command("AC101 C 270")
        self.assertEqual(commands[0].kind, SET_HEADING)
        self.assertEqual(commands[0].params["heading"], 270.0)

    def test_chained_and_case_insensitive(self):
        callsign, commands = parse_command("  ac101 c 090 c 5 s 250  ")
        self.assertEqual(callsign, "AC101")
        self.assertEqual([c.kind for c in commands], [SET_HEADING, SET_ALTITUDE, SET_SPEED])
        self.assertEqual(commands[1].params["altitude"], 5000.0)
        self.assertEqual(commands[2].params["speed"], 250.0)

    def test_heading_360_is_north(self):
        _, commands = parse_command("AC101 H 360")
        self.assertEqual(commands[0].params["heading"], 0.0)

    def test_speed_is_syntactically_unbounded(self):
        _, commands = parse_command("AC101 S 9999")
        self.assertEqual(commands, [Command("AC101", SET_SPEED, {"speed": 9999.0})])

    def test_relative_turns(self):
        _, commands = parse_command("AC101 L 20 R 045")
        self.assertEqual(commands[0], Command("AC101", RELATIVE_HEADING, {"delta": -20.0}))
        self.assertEqual(commands[1], Command("AC101", RELATIVE_HEADING, {"delta": 45.0}))

    def test_hold_and_vector(self):
        _, commands = parse_command("AC101 HOLD V 12.5,-30")
        self.assertEqual(commands[0], Command("AC101", HOLD, {}))
        self.assertEqual(commands[1], Command("AC101", VECTOR, {"x": 12.5, "y": -30.0}))

    def test_parse_errors(self):
        bad = [
            "",
            "   ",
            None,
            "AC101",
            "BADVERB 1",
            "AC101 X 1",
            "AC101 H",
            "AC101 H 90",
            "AC101 H 370",
            "AC101 H HOLD",
            "AC101 C",
            "AC101 C 1234",
            "AC101 C FL120",
            "AC101 S",
            "AC101 S fast",
            "AC101 L 400",
            "AC101 V 12",
        ]
        for raw in bad:
            with self.assertRaises(ParseError, msg=repr(raw)):
                parse_command(raw)

    def test_no_partial_command_list(self):
        # A bad verb late in the chain fails the whole line
        with self.assertRaises(ParseError) as ctx:
            parse_command("AC101 H 090 S 250 Q 1")
        self.assertIn("Unknown command verb", ctx.exception.reason)


class TestValidation(unittest.TestCase):
    def setUp(self):
        self.sim = Simulation(Config, seed=0)
        self.std = self.sim.spawn("standard", 0.0, 0.0, 0.0, 300.0, 10000.0, callsign="AC101")
        self.hyp = self.sim.spawn("hypersonic", 10.0, 0.0, 0.0, 4000.0, 60000.0, callsign="HX101")
        self.lookup = self.sim.get_aircraft_by_callsign

    def test_unknown_callsign(self):
        with self.assertRaises(UnknownCallsignError) as ctx:
            validate_command(Command("AC999", SET_HEADING, {"heading": 90.0}), self.lookup, Config)
        self.assertIsInstance(ctx.exception, LookupError)
        self.assertEqual(ctx.exception.reason, "unknown callsign")

    def test_altitude_ceiling_for_standard_only(self):
        high = {"altitude": 150000.0}
        with self.assertRaises(ValidationError):
            validate_command(Command("AC101", SET_ALTITUDE, high), self.lookup, Config)
        ac = validate_command(Command("HX101", SET_ALTITUDE, high), self.lookup, Config)
        self.assertEqual(ac.uid, self.hyp)

    def test_speed_limit(self):
        # Standard max 600 kts -> 720 kts is the most that can be cleared
        validate_command(Command("AC101", SET_SPEED, {"speed": 720.0}), self.lookup, Config)
        with self.assertRaises(ValidationError) as ctx:
            validate_command(Command("AC101", SET_SPEED, {"speed": 721.0}), self.lookup, Config)
        self.assertEqual(ctx.exception.reason, "speed exceeds limits")


class TestSubmitCommand(unittest.TestCase):
    def setUp(self):
        self.sim = Simulation(Config, seed=0)
        self.uid = self.sim.spawn("standard", 0.0, 0.0, 350.0, 300.0, 10000.0, callsign="AC101")
        self.ac = self.sim.get_aircraft(self.uid)

    def test_set_heading(self):
        (res,) = self.sim.submit_command("AC101 H 090")
        self.assertTrue(res.ok)
        self.assertTrue(res.accepted)
        self.assertFalse(res.partial)
        self.assertEqual(self.ac.target_heading, 90.0)
        self.assertEqual(self.ac.state, FOLLOWING_COMMAND)

    def test_climb_and_descend_tags(self):
        self.sim.submit_command("AC101 C 12")
        self.assertEqual(self.ac.target_altitude, 12000.0)
        self.assertEqual(self.ac.state, CLIMBING)
        self.sim.submit_command("AC101 C 5")
        self.assertEqual(self.ac.target_altitude, 5000.0)
        self.assertEqual(self.ac.state, DESCENDING)

    def test_callsign_is_case_insensitive(self):
        (res,) = self.sim.submit_command("ac101 s 250")
        self.assertTrue(res.ok)
        self.assertEqual(self.ac.target_speed, 250.0)

    def test_excessive_speed_rejected(self):
        (res,) = self.sim.submit_command("AC101 S 9999")
        self.assertFalse(res.ok)
        self.assertEqual(res.reason, "speed exceeds limits")
        self.assertEqual(self.ac.target_speed, 300.0)

    def test_unknown_callsign_rejected(self):
        (res,) = self.sim.submit_command("AC999 H 090")
        self.assertFalse(res.ok)
        self.assertEqual(res.reason, "unknown callsign")
        self.assertEqual(self.sim.get_metrics()["rejected"], 1)

    def test_parse_error_is_reported_not_raised(self):
        results = self.sim.submit_command("BADVERB 1")
        self.assertEqual(len(results), 1)
        self.assertFalse(results[0].ok)
        self.assertIn("Unknown command verb", results[0].reason)
        self.assertTrue(any("CMD_PARSE_ERR" in line for line in self.sim.get_log()))
        self.assertEqual(self.ac.target_heading, 350.0)

    def test_chain_continues_after_rejection(self):
        results = self.sim.submit_command("AC101 S 9999 H 180 C 8")
        self.assertEqual([r.ok for r in results], [False, True, True])
        self.assertEqual(self.ac.target_speed, 300.0)
        self.assertEqual(self.ac.target_heading, 180.0)
        self.assertEqual(self.ac.target_altitude, 8000.0)
        metrics = self.sim.get_metrics()
        self.assertEqual(metrics["commands"], 2)
        self.assertEqual(metrics["rejected"], 1)

    def test_relative_heading_resolved_against_current(self):
        (res,) = self.sim.submit_command("AC101 R 20")
        self.assertTrue(res.ok)
        self.assertEqual(res.kind, SET_HEADING)
        self.assertAlmostEqual(self.ac.target_heading, 10.0)
        self.sim.submit_command("AC101 L 010")
        self.assertAlmostEqual(self.ac.target_heading, 340.0)

    def test_resolve_relative_leaves_absolute_alone(self):
        cmd = Command("AC101", SET_SPEED, {"speed": 250.0})
        self.assertIs(resolve_relative_heading(cmd, 123.0), cmd)

    def test_hold_freezes_targets(self):
        self.sim.submit_command("AC101 H 090 S 400")
        for _ in range(30):
            self.sim.tick()
        self.sim.submit_command("AC101 HOLD")
        self.assertEqual(self.ac.state, HOLDING)
        self.assertEqual(self.ac.target_heading, self.ac.heading)
        self.assertEqual(self.ac.target_speed, self.ac.speed)
        self.assertEqual(self.ac.target_altitude, self.ac.altitude)

    def test_vector_stores_waypoint(self):
        self.sim.submit_command("AC101 V 10,-20")
        self.assertEqual(self.ac.waypoint, (10.0, -20.0))
        self.assertEqual(self.sim.list_aircraft_display_data()[0].waypoint, (10.0, -20.0))

    def test_log_records_dispatch(self):
        self.sim.submit_command("AC101 H 090")
        log = self.sim.get_log()
        self.assertIn("CMD_OK: AC101 H 090", log[0])
        self.assertIn("CMD_DISPATCH set_heading -> AC101", log[1])


if __name__ == '__main__':
    unittest.main()

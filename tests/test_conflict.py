import unittest

from config import Config
from radarsim.aircraft import EVASIVE, Aircraft
from radarsim.conflict import detect_conflicts, resolve_conflicts
from radarsim.kinematics import KNOTS_TO_KMS


def make_aircraft(uid, x, y, heading, speed, altitude=10000.0, category="standard"):
    return Aircraft(
        uid=uid, callsign=f"AC{100 + uid}", category=category,
        profile=Config.AIRCRAFT_PROFILES[category],
        x=x, y=y, heading=heading, speed=speed, altitude=altitude,
    )


class TestConflictDetection(unittest.TestCase):
    def head_on(self, separation_km=20.0, offset_km=0.0, alt_b=10000.0, speed=400.0):
        # A flies East from the origin, B flies West toward it
        a = make_aircraft(1, 0.0, 0.0, 90.0, speed)
        b = make_aircraft(2, separation_km, offset_km, 270.0, speed, altitude=alt_b)
        return a, b

    def test_head_on_is_flagged_before_cpa(self):
        a, b = self.head_on()
        conflicts = detect_conflicts([a, b])
        self.assertEqual(len(conflicts), 1)
        c = conflicts[0]
        self.assertEqual({c.id_a, c.id_b}, {1, 2})
        closure_kms = 2 * 400.0 * KNOTS_TO_KMS
        self.assertAlmostEqual(c.time_to_approach, 20.0 / closure_kms, places=6)
        self.assertAlmostEqual(c.distance_at_approach, 0.0, places=6)

    def test_detection_is_symmetric(self):
        a, b = self.head_on(offset_km=2.0)
        ab = detect_conflicts([a, b])
        ba = detect_conflicts([b, a])
        self.assertEqual(len(ab), 1)
        self.assertEqual(len(ba), 1)
        self.assertEqual({ab[0].id_a, ab[0].id_b}, {ba[0].id_a, ba[0].id_b})
        self.assertAlmostEqual(ab[0].time_to_approach, ba[0].time_to_approach)
        self.assertAlmostEqual(ab[0].distance_at_approach, ba[0].distance_at_approach)

    def test_not_flagged_once_past_cpa(self):
        # Same geometry, but already flown through each other and diverging
        a = make_aircraft(1, 20.0, 0.0, 90.0, 400.0)
        b = make_aircraft(2, 0.0, 0.0, 270.0, 400.0)
        self.assertEqual(detect_conflicts([a, b]), [])

    def test_parallel_tracks_never_flagged(self):
        for gap_km in (0.5, 1.0, 4.0, 50.0):
            a = make_aircraft(1, 0.0, 0.0, 45.0, 300.0)
            b = make_aircraft(2, gap_km, 0.0, 45.0, 300.0)
            self.assertEqual(detect_conflicts([a, b]), [], msg=f"gap {gap_km} km")

    def test_vertical_separation_protects(self):
        a, b = self.head_on(alt_b=11000.0)
        self.assertEqual(detect_conflicts([a, b]), [], "1000 ft is not less than the minimum")
        a, b = self.head_on(alt_b=10900.0)
        self.assertEqual(len(detect_conflicts([a, b])), 1)

    def test_lateral_miss_distance(self):
        a, b = self.head_on(offset_km=6.0)
        self.assertEqual(detect_conflicts([a, b]), [])
        conflicts = detect_conflicts([a, b], lateral_sep_km=7.0)
        self.assertEqual(len(conflicts), 1)
        self.assertAlmostEqual(conflicts[0].distance_at_approach, 6.0, places=6)

    def test_lookahead_horizon(self):
        # ~729 s to CPA, beyond the default 300 s window
        a, b = self.head_on(separation_km=300.0)
        self.assertEqual(detect_conflicts([a, b]), [])
        self.assertEqual(len(detect_conflicts([a, b], lookahead_sec=1000.0)), 1)

    def test_each_pair_reported_once(self):
        # Three aircraft converging on the same point
        a = make_aircraft(1, -10.0, 0.0, 90.0, 400.0)
        b = make_aircraft(2, 10.0, 0.0, 270.0, 400.0)
        c = make_aircraft(3, 0.0, -10.0, 0.0, 400.0)
        pairs = {frozenset((c.id_a, c.id_b)) for c in detect_conflicts([a, b, c])}
        self.assertEqual(pairs, {frozenset((1, 2)), frozenset((1, 3)), frozenset((2, 3))})

    def test_fewer_than_two_aircraft(self):
        self.assertEqual(detect_conflicts([]), [])
        self.assertEqual(detect_conflicts([make_aircraft(1, 0, 0, 0, 300)]), [])

    def test_accepts_snapshots(self):
        a, b = self.head_on()
        conflicts = detect_conflicts([a.to_view(Config), b.to_view(Config)])
        self.assertEqual(len(conflicts), 1)


class TestConflictResolution(unittest.TestCase):
    def test_both_aircraft_turn_off_and_climb(self):
        a = make_aircraft(1, 0.0, 0.0, 90.0, 400.0)
        b = make_aircraft(2, 20.0, 0.0, 270.0, 400.0)
        registry = {1: a, 2: b}
        resolve_conflicts(detect_conflicts([a, b]), registry, Config)

        # A sees B at 090 -> turns to 180; B sees A at 270 -> turns to 000
        self.assertAlmostEqual(a.target_heading, 180.0)
        self.assertAlmostEqual(b.target_heading, 0.0)
        self.assertEqual(a.target_altitude, 12000.0)
        self.assertEqual(b.target_altitude, 12000.0)
        self.assertEqual(a.state, EVASIVE)
        self.assertEqual(b.state, EVASIVE)

    def test_missing_aircraft_is_skipped(self):
        a = make_aircraft(1, 0.0, 0.0, 90.0, 400.0)
        b = make_aircraft(2, 20.0, 0.0, 270.0, 400.0)
        conflicts = detect_conflicts([a, b])
        resolve_conflicts(conflicts, {1: a}, Config)
        self.assertNotEqual(a.state, EVASIVE)


if __name__ == '__main__':
    unittest.main()

import argparse

from tqdm import tqdm

from config import Config
from radarsim.simulation import Simulation
from radarsim.utils.logger import setup_logging


def play(seconds, standard=5, hypersonic=1, seed=None, radar_mode=None, radar_range=None, commands=()):
    sim = Simulation(Config, seed=seed, radar_mode=radar_mode)
    for _ in range(hypersonic):
        sim.add_aircraft("hypersonic")
    for _ in range(standard):
        sim.add_aircraft("standard")
    if radar_range is not None:
        print(f"Radar range set to {sim.set_radar_range(radar_range):.0f} km")

    for raw in commands:
        for res in sim.submit_command(raw):
            status = "OK" if res.ok else f"REJECTED ({res.reason})"
            if res.partial:
                status = f"PARTIAL ({res.note})"
            print(f"> {raw}: {res.kind or '-'} {status}")

    n_ticks = int(round(seconds / sim.step))
    print(f"Running {n_ticks} ticks ({seconds:.0f}s simulated, radar mode '{sim.radar.mode}')...")

    sim.start()
    try:
        for _ in tqdm(range(n_ticks)):
            if not sim.is_running:
                break
            sim.tick()
    except KeyboardInterrupt:
        print("Stopping...")
    finally:
        sim.pause()

    # === SUMMARY ===
    print(f"\n{'Callsign':>8} | {'Hdg':>5} | {'Spd':>7} | {'Alt':>7} | {'X km':>7} | {'Y km':>7} | State")
    print("-" * 72)
    for v in sim.list_aircraft_display_data():
        spd = f"M{v.mach:.2f}" if v.is_hypersonic else f"{v.speed:.0f}"
        print(f"{v.callsign:>8} | {v.heading:5.0f} | {spd:>7} | {v.altitude:7.0f} | "
              f"{v.x:7.1f} | {v.y:7.1f} | {v.state}")

    radar = sim.get_radar_state()
    tracked = "n/a" if radar.tracked_targets is None else len(radar.tracked_targets)
    print(f"\nRadar: range {radar.range:.0f} km, sweep {radar.sweep_angle:.0f} deg, tracked {tracked}")
    print(f"Active conflicts: {len(sim.get_conflicts())}")
    print(f"Metrics: {sim.get_metrics()}")
    print("\nRecent log:")
    for line in sim.get_log(10):
        print(f"  {line}")
    return sim


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the radar simulation headless")
    parser.add_argument("--seconds", type=float, default=60.0, help="Simulated seconds to run")
    parser.add_argument("--standard", type=int, default=5, help="Number of standard aircraft")
    parser.add_argument("--hypersonic", type=int, default=1, help="Number of hypersonic aircraft")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--radar-mode", choices=["sweep", "live"], default=None)
    parser.add_argument("--range", type=float, default=None, help="Radar range in km (50-500)")
    parser.add_argument("--command", action="append", default=[], help='e.g. "AC102 H 090 C 12"')
    parser.add_argument("--log-level", default=Config.LOG_LEVEL)
    args = parser.parse_args()

    setup_logging(args.log_level)
    play(args.seconds, args.standard, args.hypersonic, args.seed, args.radar_mode, args.range, args.command)

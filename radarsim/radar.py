from config import Config
from radarsim.radar_live import LiveRadar, RadarState
from radarsim.radar_sweep import SweepRadar, Track

# Facade Pattern: Select the detection strategy by name
# 'sweep' = probabilistic beam painting with track persistence
# 'live'  = no tracking; positions are read straight from the aircraft snapshots
RADAR_MODES = {
    LiveRadar.mode: LiveRadar,
    SweepRadar.mode: SweepRadar,
}


def make_radar(mode=None, cfg=Config, rng=None):
    """
    Build the radar for a simulation.

    Args:
        mode: 'sweep' or 'live'; defaults to cfg.RADAR_MODE
        cfg: Configuration class
        rng: numpy Generator used for detection draws

    Raises:
        ValueError: Unknown mode.
    """
    mode = mode or getattr(cfg, 'RADAR_MODE', SweepRadar.mode)
    if mode not in RADAR_MODES:
        raise ValueError(f"Unknown radar mode: {mode!r} (expected one of {sorted(RADAR_MODES)})")
    return RADAR_MODES[mode](cfg, rng)


__all__ = ["make_radar", "RADAR_MODES", "LiveRadar", "SweepRadar", "RadarState", "Track"]

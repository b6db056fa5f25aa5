import logging
import time

logger = logging.getLogger(__name__)


class SimulationRunner:
    """
    Wall-clock driver for a Simulation. Each frame measures the time since the
    previous frame and hands it to Simulation.advance(), which runs whole
    physics ticks only. The running flag is checked at the top of every frame,
    so stop() never interrupts a tick.
    """

    def __init__(self, sim, clock=time.perf_counter, sleep=time.sleep):
        self.sim = sim
        self.clock = clock
        self.sleep = sleep
        self.last_time = None
        self.frames = 0

    @property
    def running(self):
        return self.sim.is_running

    def start(self):
        if self.sim.is_running:
            return
        self.sim.start()
        self.last_time = self.clock()
        logger.info("Simulation started at t=%.2fs", self.sim.time)

    def stop(self):
        self.sim.pause()
        logger.info("Simulation stopped at t=%.2fs after %d ticks", self.sim.time, self.sim.tick_count)

    def frame(self, now=None):
        """
        Run one display frame.

        Returns:
            int: Physics ticks executed this frame (0 when stopped)
        """
        if not self.sim.is_running:
            return 0
        now = self.clock() if now is None else now
        elapsed = now - (self.last_time if self.last_time is not None else now)
        self.last_time = now
        self.frames += 1
        return self.sim.advance(elapsed)

    def run(self, duration=None, max_frames=None, frame_interval=1.0 / 60.0, on_frame=None):
        """
        Drive frames until stopped, `duration` wall seconds pass or `max_frames`
        frames have run.

        Args:
            duration: Wall-clock seconds to run for (None = unbounded)
            max_frames: Maximum number of frames (None = unbounded)
            frame_interval: Sleep between frames, standing in for the display refresh
            on_frame: Optional callback(sim) after every frame, e.g. to render
        """
        self.start()
        started = self.clock()
        frames = 0
        try:
            while self.sim.is_running:
                self.frame()
                frames += 1
                if on_frame is not None:
                    on_frame(self.sim)
                if max_frames is not None and frames >= max_frames:
                    break
                if duration is not None and self.clock() - started >= duration:
                    break
                self.sleep(frame_interval)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.stop()
        return frames

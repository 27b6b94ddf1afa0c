from typing import Callable, List, Optional

from link import InvalidState, LinkModel, RenderState
from logging_config import setup_logger
from options import RunParameters

logger = setup_logger(__name__)

# Simulation seconds advanced per tick
DEFAULT_STEP = 1E-5
# Wall-clock milliseconds between ticks
DEFAULT_INTERVAL_MS = 50


# ============================================================================
# 1. SIMULATION CLOCK
# ============================================================================

class SimulationClock:
    """
    Drives a LinkModel forward at a fixed cadence
    
    Ticks are scheduled one at a time through the scheduler's after() and
    the pending one is cancelled with after_cancel() on stop, so the loop
    never needs to be suspended from outside. A Tk widget is a scheduler.
    """
    
    def __init__(self, model: LinkModel, scheduler=None,
                 step: float = DEFAULT_STEP,
                 interval_ms: int = DEFAULT_INTERVAL_MS,
                 on_tick: Optional[Callable[[Optional[RenderState]], None]] = None,
                 on_finished: Optional[Callable[[], None]] = None,
                 on_start: Optional[Callable[[], None]] = None):
        """
        Initialize simulation clock
        
        Args:
            model: LinkModel to advance
            scheduler: Object with after(ms, fn) and after_cancel(id), or None
                for synchronous runs only
            step: Simulation seconds per tick
            interval_ms: Wall-clock milliseconds between ticks
            on_tick: Called after every tick with the model's render state
            on_finished: Called once when the run reaches its total time
            on_start: Called once the packet is on the link, before the first tick
        """
        if step <= 0:
            raise ValueError(f"Tick step must be positive, got {step}")
        if interval_ms < 0:
            raise ValueError(f"Tick interval must not be negative, got {interval_ms}")
        self.model = model
        self.scheduler = scheduler
        self.step = step
        self.interval_ms = interval_ms
        self.on_tick = on_tick
        self.on_finished = on_finished
        self.on_start = on_start
        self._running = False
        self._elapsed = 0.0
        self._total_time = 0.0
        self._tick_count = 0
        self._pending = None
    
    @property
    def running(self) -> bool:
        return self._running
    
    @property
    def elapsed(self) -> float:
        return self._elapsed
    
    @property
    def total_time(self) -> float:
        return self._total_time
    
    @property
    def tick_count(self) -> int:
        return self._tick_count
    
    def prepare(self, params: RunParameters) -> float:
        """
        Configure the link and emit the packet at t=0
        
        Args:
            params: Length, rate and size for this run
        
        Returns:
            Total time of the run (s)
        """
        if self._running:
            raise InvalidState("A run is already in progress")
        
        self.model.configure(params.length_m, params.rate_bps)
        self.model.send_packet(params.size_bits, 0.0)
        self.model.update_time(0.0)
        
        self._total_time = self.model.total_time()
        self._elapsed = 0.0
        self._tick_count = 0
        self._running = True
        logger.info(f"Run started: total time {self.model.format_elapsed_time(self._total_time)}")
        if self.on_start:
            self.on_start()
        return self._total_time
    
    def start(self, params: RunParameters) -> float:
        """Prepare a run and schedule its first tick"""
        if self.scheduler is None:
            raise InvalidState("start() needs a scheduler; use run_to_completion()")
        total_time = self.prepare(params)
        self._schedule_next()
        return total_time
    
    def tick(self) -> bool:
        """
        Advance the model by one step
        
        Returns:
            True while the run continues, False once it has finished or stopped
        """
        if not self._running:
            return False
        
        self._tick_count += 1
        self._elapsed = self._tick_count * self.step
        self.model.update_time(self._elapsed)
        
        if self.on_tick:
            self.on_tick(self.model.render_state())
        
        if self._elapsed >= self._total_time:
            self.model.clear_packet()
            self._running = False
            logger.info(f"Run finished after {self._tick_count} ticks")
            if self.on_finished:
                self.on_finished()
            return False
        
        return True
    
    def stop(self) -> None:
        """Stop ticking; the model keeps its current state"""
        if self._pending is not None:
            self.scheduler.after_cancel(self._pending)
            self._pending = None
        if self._running:
            logger.info(f"Run stopped at {self.model.format_elapsed_time(self._elapsed)}")
        self._running = False
    
    def reset(self) -> None:
        """Stop, return the model to t=0 with no packet and repaint"""
        self.stop()
        self.model.reset()
        self._elapsed = 0.0
        self._tick_count = 0
        if self.on_tick:
            self.on_tick(self.model.render_state())
    
    def run_to_completion(self, params: RunParameters,
                          max_ticks: Optional[int] = None) -> List[Optional[RenderState]]:
        """
        Run a whole simulation synchronously, without a scheduler
        
        Args:
            params: Length, rate and size for this run
            max_ticks: Stop early after this many ticks
        
        Returns:
            The render state sampled after every tick (None once the packet is gone)
        """
        self.prepare(params)
        samples = []
        
        while self._running:
            if max_ticks is not None and self._tick_count >= max_ticks:
                self.stop()
                break
            self.tick()
            samples.append(self.model.render_state() if self._running else None)
        
        return samples
    
    def _on_timer(self) -> None:
        self._pending = None
        if self.tick():
            self._schedule_next()
    
    def _schedule_next(self) -> None:
        self._pending = self.scheduler.after(self.interval_ms, self._on_timer)

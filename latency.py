from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, localcontext
import math

# Signal speed in the medium (m/s)
PROPAGATION_SPEED = 2.8E8

_MILLIS_QUANTUM = Decimal("0.001")

# ============================================================================
# 1. DELAY CALCULATIONS
# ============================================================================

def transmission_delay(size_bits: float, rate_bps: float) -> float:
    """Time to push every bit of the packet onto the link (s)"""
    if rate_bps <= 0:
        raise ValueError(f"Data rate must be positive, got {rate_bps}")
    return size_bits / rate_bps


def propagation_delay(length_m: float, speed: float = PROPAGATION_SPEED) -> float:
    """Time for a signal to traverse the link (s)"""
    if speed <= 0:
        raise ValueError(f"Propagation speed must be positive, got {speed}")
    return length_m / speed


@dataclass(frozen=True)
class DelayBreakdown:
    """Transmission and propagation components of a packet's total time"""
    
    transmission_delay: float   # seconds
    propagation_delay: float    # seconds
    
    @classmethod
    def for_link(cls, length_m: float, rate_bps: float, size_bits: float,
                 speed: float = PROPAGATION_SPEED) -> "DelayBreakdown":
        """
        Build a breakdown from link and packet parameters
        
        Args:
            length_m: Link length (m)
            rate_bps: Data rate (bit/s)
            size_bits: Packet size (bits)
            speed: Propagation speed (m/s)
        
        Returns:
            DelayBreakdown object
        """
        return cls(
            transmission_delay=transmission_delay(size_bits, rate_bps),
            propagation_delay=propagation_delay(length_m, speed),
        )
    
    @property
    def total_time(self) -> float:
        return self.transmission_delay + self.propagation_delay
    
    @property
    def dominant(self) -> str:
        """Which component dominates the total time"""
        if self.transmission_delay >= self.propagation_delay:
            return "transmission"
        return "propagation"
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "transmission_delay_s": self.transmission_delay,
            "propagation_delay_s": self.propagation_delay,
            "total_time_s": self.total_time,
            "transmission_delay_ms": format_elapsed_time(self.transmission_delay),
            "propagation_delay_ms": format_elapsed_time(self.propagation_delay),
            "total_time_ms": format_elapsed_time(self.total_time),
            "dominant": self.dominant,
        }


# ============================================================================
# 2. TIME FORMATTING
# ============================================================================

def format_elapsed_time(seconds: float) -> str:
    """
    Format a simulation time as milliseconds with three fractional digits
    
    Digits past the third are cut off, not rounded: 0.0123456 s gives
    "12.345 ms". The shortest decimal form of the float is scaled so that
    values like 0.012345 do not pick up binary noise from a float multiply.
    
    Args:
        seconds: Simulation time (s)
    
    Returns:
        Display string such as "12.345 ms"
    """
    seconds = float(seconds)
    if not math.isfinite(seconds):
        raise ValueError(f"Cannot format non-finite time {seconds}")
    
    millis = Decimal(repr(seconds)).scaleb(3)
    with localcontext() as ctx:
        # Room for every integer digit plus the three decimals
        ctx.prec = max(ctx.prec, millis.adjusted() + 5)
        truncated = millis.quantize(_MILLIS_QUANTUM, rounding=ROUND_DOWN)
        if truncated.is_zero():
            truncated = abs(truncated)
    return f"{truncated} ms"


# ============================================================================
# 3. METRICS DISPLAY WIDGET
# ============================================================================

class DelayMetricsDisplay:
    """
    Shows the delay breakdown of the current run in a label widget
    """
    
    def __init__(self, label_widget):
        """
        Initialize metrics display
        
        Args:
            label_widget: Tkinter Label widget (anything with config(text=...))
        """
        self.label = label_widget
        self.current_breakdown = None
    
    def update_display(self, breakdown: DelayBreakdown = None) -> None:
        """Refresh the label with a breakdown, or a placeholder when idle"""
        self.current_breakdown = breakdown
        
        if breakdown is None:
            self.label.config(text="No packet in flight")
            return
        
        display_text = (
            f"Transmission delay: {format_elapsed_time(breakdown.transmission_delay)}  |  "
            f"Propagation delay: {format_elapsed_time(breakdown.propagation_delay)}  |  "
            f"Total: {format_elapsed_time(breakdown.total_time)}  "
            f"({breakdown.dominant} dominated)"
        )
        
        self.label.config(text=display_text)

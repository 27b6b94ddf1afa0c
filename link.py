from dataclasses import dataclass
from enum import Enum
from typing import Optional

from latency import PROPAGATION_SPEED, DelayBreakdown, format_elapsed_time
from logging_config import setup_logger
from packet import Packet

logger = setup_logger(__name__)

# Drawn width of the link on the canvas (pixels)
DEFAULT_LINK_WIDTH_PX = 510


# ============================================================================
# 1. ERRORS
# ============================================================================

class LinkModelError(Exception):
    """Base class for link model errors"""


class InvalidState(LinkModelError):
    """Operation needs configuration or a packet that is missing"""


class NoActivePacket(InvalidState):
    """Time or render query made while no packet is on the link"""

    def __init__(self, operation: str):
        super().__init__(f"{operation} requires a packet on the link")
        self.operation = operation


# ============================================================================
# 2. DATA MODELS
# ============================================================================

class LinkState(Enum):
    """Enum for link states"""
    IDLE = "idle"               # No packet
    IN_FLIGHT = "in_flight"     # Packet being transmitted or propagating


@dataclass(frozen=True)
class LinkConfiguration:
    """Physical parameters of the point-to-point link"""
    
    length_m: float     # Link length (m)
    rate_bps: float     # Data rate (bit/s)
    
    def __post_init__(self):
        if self.length_m <= 0:
            raise ValueError(f"Link length must be positive, got {self.length_m}")
        if self.rate_bps <= 0:
            raise ValueError(f"Data rate must be positive, got {self.rate_bps}")
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "length_m": self.length_m,
            "rate_bps": self.rate_bps,
        }


@dataclass(frozen=True)
class RenderState:
    """
    Sampled view of the packet on the link
    
    occupied_start and occupied_end are pixel offsets along the drawn link,
    both within [0, link_width] with occupied_start <= occupied_end.
    """
    
    occupied_start: float
    occupied_end: float
    link_width: float
    current_time: float
    
    @property
    def start_fraction(self) -> float:
        return self.occupied_start / self.link_width
    
    @property
    def end_fraction(self) -> float:
        return self.occupied_end / self.link_width
    
    @property
    def occupied_width(self) -> float:
        return self.occupied_end - self.occupied_start
    
    @property
    def elapsed_label(self) -> str:
        return format_elapsed_time(self.current_time)
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "current_time": self.current_time,
            "elapsed": self.elapsed_label,
            "occupied_start": self.occupied_start,
            "occupied_end": self.occupied_end,
            "start_fraction": self.start_fraction,
            "end_fraction": self.end_fraction,
        }


# ============================================================================
# 3. LINK MODEL
# ============================================================================

class LinkModel:
    """
    Timing model of a single packet crossing a point-to-point link
    
    The model is cadence-agnostic: it only moves when update_time() is called.
    Access is single-threaded; the caller advances time and queries state in
    strict sequence.
    """
    
    def __init__(self, link_width_px: float = DEFAULT_LINK_WIDTH_PX,
                 propagation_speed: float = PROPAGATION_SPEED):
        """
        Initialize link model
        
        Args:
            link_width_px: Drawn width of the link (pixels)
            propagation_speed: Signal speed in the medium (m/s)
        """
        if link_width_px <= 0:
            raise ValueError(f"Link width must be positive, got {link_width_px}")
        self.link_width_px = link_width_px
        self.propagation_speed = propagation_speed
        self.configuration: Optional[LinkConfiguration] = None
        self.packet: Optional[Packet] = None
        self.current_time = 0.0
    
    @property
    def state(self) -> LinkState:
        if self.packet is None:
            return LinkState.IDLE
        return LinkState.IN_FLIGHT
    
    def configure(self, length: float, rate: float) -> None:
        """
        Set link parameters for subsequent packet sends
        
        Args:
            length: Link length (m)
            rate: Data rate (bit/s)
        """
        self.configuration = LinkConfiguration(length_m=length, rate_bps=rate)
        logger.info(f"Link configured: length={length:g} m, rate={rate:g} bit/s")
    
    def send_packet(self, size_bits: float, emission_time: float = 0.0) -> Packet:
        """
        Put a new packet on the link, replacing any existing one
        
        Args:
            size_bits: Packet size (bits)
            emission_time: Simulation time the first bit is sent (s)
        
        Returns:
            The tracked Packet
        """
        if self.configuration is None:
            raise InvalidState("configure() must be called before send_packet()")
        
        packet = Packet(size_bits=size_bits, emission_time=emission_time)
        if self.packet is not None:
            logger.info("Replacing packet already on the link")
        self.packet = packet
        logger.info(f"Packet sent: {size_bits:g} bits at t={emission_time:g} s")
        return packet
    
    def update_time(self, t: float) -> None:
        """
        Record the current simulation time and drop the packet once received
        
        Args:
            t: Simulation time (s)
        """
        if t < self.current_time:
            logger.debug(f"Time moved backwards: {self.current_time:g} -> {t:g}")
        self.current_time = t
        
        if self.packet is not None and t > self.packet.emission_time + self.total_time():
            self.packet.mark_received(t)
            logger.info(f"Packet received at t={t:g} s")
            self.clear_packet()
    
    def clear_packet(self) -> None:
        """Drop the current packet, if any"""
        if self.packet is not None:
            logger.debug("Packet cleared from link")
        self.packet = None
    
    def reset(self) -> None:
        """Return to the idle state at t=0"""
        self.clear_packet()
        self.update_time(0.0)
    
    def delay_breakdown(self) -> DelayBreakdown:
        """
        Transmission and propagation delay of the current packet
        
        Returns:
            DelayBreakdown for the packet on the link
        """
        if self.packet is None:
            raise NoActivePacket("delay_breakdown()")
        return DelayBreakdown.for_link(
            self.configuration.length_m,
            self.configuration.rate_bps,
            self.packet.size_bits,
            self.propagation_speed,
        )
    
    def total_time(self) -> float:
        """Transmission delay plus propagation delay of the current packet (s)"""
        if self.packet is None:
            raise NoActivePacket("total_time()")
        return self.delay_breakdown().total_time
    
    def render_state(self) -> Optional[RenderState]:
        """
        Project the packet's wavefront onto the drawn link
        
        Returns:
            RenderState with pixel offsets, or None when no packet is on the link
        """
        if self.packet is None:
            return None
        
        breakdown = self.delay_breakdown()
        relative_time = self.packet.relative_time(self.current_time)
        raw_start = relative_time - breakdown.transmission_delay
        raw_end = relative_time
        
        scale = self.propagation_speed * self.link_width_px / self.configuration.length_m
        start = min(max(raw_start * scale, 0.0), self.link_width_px)
        end = min(max(raw_end * scale, 0.0), self.link_width_px)
        
        return RenderState(
            occupied_start=start,
            occupied_end=end,
            link_width=self.link_width_px,
            current_time=self.current_time,
        )
    
    def format_elapsed_time(self, t: Optional[float] = None) -> str:
        """Elapsed-time label for t, or for the current time when omitted"""
        if t is None:
            t = self.current_time
        return format_elapsed_time(t)
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "state": self.state.value,
            "current_time": self.current_time,
            "link_width_px": self.link_width_px,
            "propagation_speed": self.propagation_speed,
            "configuration": self.configuration.to_dict() if self.configuration else None,
            "packet": self.packet.to_dict() if self.packet else None,
        }

from enum import Enum
from dataclasses import dataclass

# ============================================================================
# 1. PACKET CLASS
# ============================================================================

class PacketState(Enum):
    """Enum for packet states"""
    IN_FLIGHT = "in_flight"     # Being pushed onto / travelling along the link
    RECEIVED = "received"       # Last bit reached the receiver


@dataclass
class Packet:
    """
    The single data packet travelling across the link
    """
    
    size_bits: float                 # Packet size in bits
    emission_time: float = 0.0       # Simulation time the first bit is sent (s)
    state: PacketState = PacketState.IN_FLIGHT
    received_time: float = 0.0       # When the last bit arrived (0 if in flight)
    
    def __post_init__(self):
        """Validate packet after creation"""
        if self.size_bits <= 0:
            raise ValueError(f"Packet size must be positive, got {self.size_bits}")
    
    @property
    def size_bytes(self) -> float:
        return self.size_bits / 8
    
    def relative_time(self, current_time: float) -> float:
        """
        Time elapsed since emission
        
        Args:
            current_time: Current simulation time (s)
        
        Returns:
            Seconds since the first bit left the sender (negative before emission)
        """
        return current_time - self.emission_time
    
    def mark_received(self, received_time: float) -> None:
        """Mark packet as received"""
        self.state = PacketState.RECEIVED
        self.received_time = received_time
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "size_bits": self.size_bits,
            "size_bytes": self.size_bytes,
            "emission_time": self.emission_time,
            "state": self.state.value,
            "received_time": self.received_time,
        }

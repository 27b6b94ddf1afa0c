from dataclasses import dataclass
from typing import List, Tuple

# ============================================================================
# 1. PARAMETER SELECTORS
# ============================================================================

@dataclass(frozen=True)
class ParameterOption:
    """A labelled choice, e.g. "100 km" -> 1E5"""
    
    label: str
    value: float


@dataclass(frozen=True)
class ParameterSelector:
    """
    Fixed set of options for one run parameter
    """
    
    name: str
    options: Tuple[ParameterOption, ...]
    default_index: int = 0
    
    def __post_init__(self):
        if not self.options:
            raise ValueError(f"Selector {self.name} has no options")
        if not (0 <= self.default_index < len(self.options)):
            raise ValueError(f"Default index {self.default_index} out of range for {self.name}")
    
    @property
    def labels(self) -> List[str]:
        return [option.label for option in self.options]
    
    @property
    def default(self) -> ParameterOption:
        return self.options[self.default_index]
    
    def index_of(self, label: str) -> int:
        """Position of a label in the option list"""
        for i, option in enumerate(self.options):
            if option.label == label:
                return i
        raise KeyError(f"Unknown {self.name} option: {label}")
    
    def value_for(self, label: str) -> float:
        """Numeric value behind a label"""
        return self.options[self.index_of(label)].value


LENGTH_OPTIONS = ParameterSelector(
    name="length",
    options=(
        ParameterOption("10 km", 10E3),
        ParameterOption("100 km", 100E3),
        ParameterOption("500 km", 500E3),
        ParameterOption("1000 km", 1E6),
    ),
    default_index=1,
)

RATE_OPTIONS = ParameterSelector(
    name="rate",
    options=(
        ParameterOption("512 kbps", 512E3),
        ParameterOption("1 Mbps", 1E6),
        ParameterOption("10 Mbps", 10E6),
        ParameterOption("100 Mbps", 100E6),
    ),
    default_index=1,
)

# Values are in bits
SIZE_OPTIONS = ParameterSelector(
    name="packet size",
    options=(
        ParameterOption("100 Bytes", 8E2),
        ParameterOption("500 Bytes", 4E3),
        ParameterOption("1 kBytes", 8E3),
    ),
    default_index=1,
)


# ============================================================================
# 2. RUN PARAMETERS
# ============================================================================

@dataclass(frozen=True)
class RunParameters:
    """The three values read from the selectors when a run starts"""
    
    length_m: float
    rate_bps: float
    size_bits: float
    
    @classmethod
    def from_labels(cls, length: str, rate: str, size: str) -> "RunParameters":
        """
        Build parameters from selector labels
        
        Args:
            length: Label from LENGTH_OPTIONS
            rate: Label from RATE_OPTIONS
            size: Label from SIZE_OPTIONS
        
        Returns:
            RunParameters object
        """
        return cls(
            length_m=LENGTH_OPTIONS.value_for(length),
            rate_bps=RATE_OPTIONS.value_for(rate),
            size_bits=SIZE_OPTIONS.value_for(size),
        )
    
    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "length_m": self.length_m,
            "rate_bps": self.rate_bps,
            "size_bits": self.size_bits,
        }


def default_parameters() -> RunParameters:
    """Parameters for the default selection of every selector"""
    return RunParameters(
        length_m=LENGTH_OPTIONS.default.value,
        rate_bps=RATE_OPTIONS.default.value,
        size_bits=SIZE_OPTIONS.default.value,
    )

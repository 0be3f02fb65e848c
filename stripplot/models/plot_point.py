from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = [
    "PlotPoint",
]


@dataclass(frozen=True)
class PlotPoint:
    """One mark on the strip plot: a single (chemical, sample) log RF value."""
    chemical: str  # identity key, one band per distinct value
    log_rf: float
    feature_id: Any
    sample_name: str
    mode: str  # "ESI+" / "ESI-"
    retention_time: Any
    color: str

    @property
    def display_name(self) -> str:
        """Chemical name without the ionization-mode suffix."""
        return self.chemical.split(" (")[0]

"""Impact Effects Simulator - asteroid impact consequences from closed-form scaling laws."""

from .models import (
    Composition,
    GeoPoint,
    ImpactParameters,
    ImpactResult,
)
from .pipeline import (
    ImpactPipeline,
    calculate_impact,
    calculate_impact_sync,
    preset_parameters,
    PRESETS,
)
from .tsunami import BandOceanClassifier, OceanLookupError

__version__ = "1.0.0"
__all__ = [
    "Composition",
    "GeoPoint",
    "ImpactParameters",
    "ImpactResult",
    "ImpactPipeline",
    "calculate_impact",
    "calculate_impact_sync",
    "preset_parameters",
    "PRESETS",
    "BandOceanClassifier",
    "OceanLookupError",
]

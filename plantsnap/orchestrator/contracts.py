from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, List

UNKNOWN = "unknown"
FALLBACK_NOTE = "Unable to parse response"


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FALLBACK = "fallback"


@dataclass
class PlantResult:
    common_name: str
    scientific_name: str
    confidence: float          # 0.0 - 1.0, not enforced
    care: List[str] = field(default_factory=list)   # <= 2 tips by convention
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "commonName": self.common_name,
            "scientificName": self.scientific_name,
            "confidence": self.confidence,
            "care": list(self.care),
            "notes": self.notes,
        }


# Static result served in demo mode, no tokens spent
DEMO_RESULT = PlantResult(
    common_name="Peace Lily",
    scientific_name="Spathiphyllum",
    confidence=0.95,
    care=["Keep soil moist", "Bright indirect light"],
    notes=None,
)


def demo_result() -> PlantResult:
    return replace(DEMO_RESULT, care=list(DEMO_RESULT.care))


def fallback_result() -> PlantResult:
    """Degraded-but-valid result shown when a live call fails for any reason."""
    return PlantResult(
        common_name=UNKNOWN,
        scientific_name=UNKNOWN,
        confidence=0.0,
        care=[],
        notes=FALLBACK_NOTE,
    )

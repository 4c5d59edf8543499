from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

import numpy as np


@dataclass(frozen=True)
class ColorVector:
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_dict(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColorVector":
        return cls(r=int(data["r"]), g=int(data["g"]), b=int(data["b"]))


@dataclass(frozen=True)
class ExpectedColorStats:
    """
    Expected color profile authored for a recipe step.
    brightness_range is (min, max), each in 0..1.
    """
    avg_rgb: ColorVector
    brightness_range: Tuple[float, float]
    tolerance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avgRgb": self.avg_rgb.to_dict(),
            "brightnessRange": list(self.brightness_range),
            "tolerance": self.tolerance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpectedColorStats":
        low, high = data["brightnessRange"]
        return cls(
            avg_rgb=ColorVector.from_dict(data["avgRgb"]),
            brightness_range=(float(low), float(high)),
            tolerance=float(data["tolerance"]),
        )


@dataclass(frozen=True)
class Delta:
    r: int
    g: int
    b: int
    brightness: float

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r, "g": self.g, "b": self.b, "brightness": self.brightness}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Delta":
        return cls(r=int(data["r"]), g=int(data["g"]), b=int(data["b"]), brightness=float(data["brightness"]))


class ComparisonCategory(str, Enum):
    MATCH = "match"
    CLOSE = "close"
    OFF = "off"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    ComparisonCategory.MATCH: 0,
    ComparisonCategory.CLOSE: 1,
    ComparisonCategory.OFF: 2,
}


@dataclass(frozen=True)
class ComparisonResult:
    average: ColorVector
    brightness: float
    delta: Delta
    category: ComparisonCategory
    guidance: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average": self.average.to_dict(),
            "brightness": self.brightness,
            "delta": self.delta.to_dict(),
            "category": self.category.value,
            "guidance": list(self.guidance),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonResult":
        return cls(
            average=ColorVector.from_dict(data["average"]),
            brightness=float(data["brightness"]),
            delta=Delta.from_dict(data["delta"]),
            category=ComparisonCategory(data["category"]),
            guidance=tuple(data["guidance"]),
        )


@dataclass
class RasterBuffer:
    """Decoded RGBA8 image, pixels shaped (height, width, 4)."""
    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_rgb(cls, rgb: np.ndarray) -> "RasterBuffer":
        h, w = rgb.shape[:2]
        alpha = np.full((h, w, 1), 255, dtype=np.uint8)
        pixels = np.concatenate([rgb.astype(np.uint8), alpha], axis=2)
        return cls(width=w, height=h, pixels=pixels)


@dataclass(frozen=True)
class SamplingConfig:
    stride: int = 2
    variance_radius: int = 3
    variance_scale: float = 10.0
    edge_scale: float = 2.0
    center_floor: float = 0.3
    base_weight: float = 0.5
    variance_boost: float = 0.3
    edge_boost: float = 0.2

    def __post_init__(self):
        if self.stride < 1:
            raise ValueError(f"stride must be at least 1, got {self.stride}")


@dataclass(frozen=True)
class GuidanceConfig:
    # Absolute 0-255 channel delta cutoffs, independent of tolerance
    channel_excess: int = 15
    opposing_deficit: int = -10
    blue_excess: int = 15
    blue_deficit: int = -15


DEFAULT_SAMPLING = SamplingConfig()
DEFAULT_GUIDANCE = GuidanceConfig()

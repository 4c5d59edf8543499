from .schemas import (
    ColorVector, ExpectedColorStats, Delta, ComparisonCategory, ComparisonResult,
    RasterBuffer, SamplingConfig, GuidanceConfig,
)
from .loader import DecodeError, decode_image
from .pipeline import AnalysisCancelled, analyze_image

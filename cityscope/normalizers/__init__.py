from .rules import (
    format_elevation,
    format_population,
    merge,
    norm_air_quality,
    norm_demographics,
    norm_weather,
    pollutant_summary,
)

__all__ = [
    "format_elevation",
    "format_population",
    "merge",
    "norm_air_quality",
    "norm_demographics",
    "norm_weather",
    "pollutant_summary",
]

from .base import Failure, Success, UpstreamClient, UpstreamResult
from .weather import WeatherClient, WeatherReading
from .air_quality import AirQualityClient, AirQualityReading
from .demographics import DemographicsClient, DemographicsReading

__all__ = [
    "Failure",
    "Success",
    "UpstreamClient",
    "UpstreamResult",
    "WeatherClient",
    "WeatherReading",
    "AirQualityClient",
    "AirQualityReading",
    "DemographicsClient",
    "DemographicsReading",
]

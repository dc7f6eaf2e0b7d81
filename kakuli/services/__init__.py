"""
Remote service adapters. Each performs a single request/response call and
maps the result into a small dataclass, or raises RemoteServiceError.
"""

from .gemini import GeminiClient
from .unsplash import UnsplashClient
from .weather import WeatherClient
from .wikipedia import WikipediaClient
from .youtube import YouTubeClient

__all__ = [
    "GeminiClient",
    "UnsplashClient",
    "WeatherClient",
    "WikipediaClient",
    "YouTubeClient",
]

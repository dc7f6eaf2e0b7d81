"""Current weather lookup via OpenWeatherMap."""
from __future__ import annotations

from dataclasses import dataclass

from .base import RemoteService, require

API_URL = "https://api.openweathermap.org/data/2.5/weather"


@dataclass(frozen=True)
class WeatherReport:
    city: str
    temperature_c: float
    humidity: int
    description: str

    def render(self) -> str:
        return (
            f"🌤️ Weather in *{self.city}*\n"
            f"🌡️ Temp: {self.temperature_c}°C\n"
            f"💧 Humidity: {self.humidity}%\n"
            f"🌍 Condition: {self.description}"
        )


class WeatherClient(RemoteService):
    name = "OpenWeatherMap"

    async def current(self, city: str) -> WeatherReport:
        data = await self.http.get_json(
            API_URL,
            params={"q": city, "appid": self.require_key(), "units": "metric"},
        )
        return WeatherReport(
            city=city,
            temperature_c=require(data, "main", "temp", service=self.name),
            humidity=require(data, "main", "humidity", service=self.name),
            description=require(data, "weather", 0, "description", service=self.name),
        )

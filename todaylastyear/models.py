# ABOUTME: Pydantic BaseModels for Open-Meteo payloads and the comparison records built from them.
# ABOUTME: Defines the coordinate, wire responses, temperature points, and the ordered ComparisonSet.

from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinate(BaseModel):
    """Geographic position an aggregation run is made for."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CurrentWeather(BaseModel):
    """The current_weather block of the Open-Meteo forecast endpoint."""

    temperature: float
    windspeed: float
    winddirection: float


class CurrentWeatherResponse(BaseModel):
    """Forecast endpoint response requested with current_weather=true."""

    current_weather: CurrentWeather


class HourlyData(BaseModel):
    """Column-oriented hourly block of the archive endpoint."""

    time: list[str]
    temperature_2m: list[float]


class HistoricalWeatherResponse(BaseModel):
    """Archive endpoint response for a single day of hourly temperatures."""

    hourly: HourlyData


class TemperaturePoint(BaseModel):
    """First hourly temperature sample of one day."""

    model_config = ConfigDict(frozen=True)

    date: date
    celsius: float


class CurrentConditions(BaseModel):
    """Current conditions at the coordinate, from the forecast endpoint."""

    model_config = ConfigDict(frozen=True)

    temperature_celsius: float
    wind_speed_kph: float
    wind_direction_deg: float

    @classmethod
    def from_response(cls, response: CurrentWeatherResponse) -> "CurrentConditions":
        cw = response.current_weather
        return cls(
            temperature_celsius=cw.temperature,
            wind_speed_kph=cw.windspeed,
            wind_direction_deg=cw.winddirection,
        )


class ComparisonRecord(BaseModel):
    """One day's temperature next to the same day one year earlier."""

    model_config = ConfigDict(frozen=True)

    date: date
    current_temp: float
    last_year_temp: float

    @property
    def difference(self) -> float:
        return self.current_temp - self.last_year_temp


class ComparisonSet(BaseModel):
    """Weekly comparison records, most recent date first, one record per date."""

    model_config = ConfigDict(frozen=True)

    records: tuple[ComparisonRecord, ...] = ()

    @model_validator(mode="after")
    def _check_order(self) -> "ComparisonSet":
        for newer, older in zip(self.records, self.records[1:]):
            if newer.date <= older.date:
                raise ValueError(
                    f"records must be strictly descending by date: {newer.date} before {older.date}"
                )
        return self

    @classmethod
    def from_records(cls, records: Iterable[ComparisonRecord]) -> "ComparisonSet":
        """Sort records by date, newest first, and wrap them."""
        return cls(records=tuple(sorted(records, key=lambda r: r.date, reverse=True)))

    def __len__(self) -> int:
        return len(self.records)

    def dates(self) -> list[date]:
        return [r.date for r in self.records]


class TodaySnapshot(BaseModel):
    """Single-pair view: each field fills in independently as its fetch resolves."""

    model_config = ConfigDict(frozen=True)

    current_temp: float | None = None
    last_year_temp: float | None = None
    current_conditions: CurrentConditions | None = None

# ABOUTME: Service layer for Open-Meteo forecast and archive calls and payload decoding.
# ABOUTME: Every failure surfaces as a FetchError subclass; details are logged, not returned.

import logging
from datetime import date
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from todaylastyear.config import ARCHIVE_URL, FORECAST_URL
from todaylastyear.dates import date_key
from todaylastyear.errors import DecodeError, TransportError
from todaylastyear.models import (
    Coordinate,
    CurrentConditions,
    CurrentWeatherResponse,
    HistoricalWeatherResponse,
    TemperaturePoint,
)

logger = logging.getLogger(__name__)

HOURLY_PARAMS = "temperature_2m"

T = TypeVar("T", bound=BaseModel)


async def fetch(client: httpx.AsyncClient, url: str, params: dict, model: type[T]) -> T:
    """Issue one GET and decode the body into `model`.

    No retry and no timeout beyond the client's own. Raises TransportError when
    there is no usable response and DecodeError when the body does not match
    the schema.
    """
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Network error for %s: %s", url, e)
        raise TransportError(url, f"request failed: {e}") from e

    try:
        return model.model_validate_json(resp.content)
    except ValidationError as e:
        logger.warning("Decoding error for %s: %s", url, e)
        raise DecodeError(url, f"unexpected {model.__name__} payload") from e


def current_params(coordinate: Coordinate) -> dict:
    return {
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
        "current_weather": "true",
    }


def historical_params(coordinate: Coordinate, day: date) -> dict:
    """Query parameters for one day of hourly temperatures."""
    key = date_key(day)
    return {
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
        "start_date": key,
        "end_date": key,
        "hourly": HOURLY_PARAMS,
    }


async def get_current_conditions(
    client: httpx.AsyncClient,
    coordinate: Coordinate,
    url: str = FORECAST_URL,
) -> CurrentConditions:
    """Fetch current temperature and wind from the forecast API."""
    response = await fetch(client, url, current_params(coordinate), CurrentWeatherResponse)
    return CurrentConditions.from_response(response)


async def get_first_hourly_temperature(
    client: httpx.AsyncClient,
    coordinate: Coordinate,
    day: date,
    url: str = ARCHIVE_URL,
) -> TemperaturePoint:
    """Fetch one archived day and keep its first hourly temperature sample."""
    response = await fetch(client, url, historical_params(coordinate, day), HistoricalWeatherResponse)
    temps = response.hourly.temperature_2m
    if not temps:
        logger.warning("No hourly temperatures for %s at %s", date_key(day), url)
        raise DecodeError(url, f"empty temperature_2m for {date_key(day)}")
    return TemperaturePoint(date=day, celsius=temps[0])

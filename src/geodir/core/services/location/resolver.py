from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger

from src.geodir.core.exceptions import (
    LocationNotFoundError,
    ProviderUnavailableError,
    TimezoneNotFoundError,
)
from src.geodir.entities.core.user import Location
from src.geodir.runtime.config.config_data import LocationConfig


class LocationResolver(ABC):
    @abstractmethod
    async def resolve(self, zipcode: str) -> Location:
        """
        Resolve a validated postal code to coordinates and a timezone.

        Args:
            zipcode: Postal code that already passed validation

        Returns:
            The resolved location

        Raises:
            ResolutionFailedError: If either lookup step fails
        """
        raise NotImplementedError


class OpenWeatherLocationResolver(LocationResolver):
    """Two-step resolver backed by the OpenWeather geocoding and One Call APIs.

    The geocoding call must succeed before the timezone call is made. No
    retries happen here; callers decide whether to try again.
    """

    def __init__(
        self,
        config: LocationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    async def resolve(self, zipcode: str) -> Location:
        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        ) as client:
            latitude, longitude = await self._fetch_coordinates(client, zipcode)
            timezone = await self._fetch_timezone(client, zipcode, latitude, longitude)

        logger.info(
            "Resolved zipcode {} to ({}, {}) {}", zipcode, latitude, longitude, timezone
        )
        return Location(latitude=latitude, longitude=longitude, timezone=timezone)

    async def _fetch_coordinates(
        self, client: httpx.AsyncClient, zipcode: str
    ) -> tuple[float, float]:
        lookup = zipcode
        if self._config.country_code:
            lookup = f"{zipcode},{self._config.country_code}"

        payload = await self._get_json(
            client,
            self._config.geocoding_url,
            {"zip": lookup},
            zipcode=zipcode,
            not_found=LocationNotFoundError,
        )
        latitude = payload.get("lat")
        longitude = payload.get("lon")
        if not _is_number(latitude) or not _is_number(longitude):
            logger.warning("Geocoding response for {} has no coordinates", zipcode)
            raise LocationNotFoundError(zipcode)
        return float(latitude), float(longitude)

    async def _fetch_timezone(
        self, client: httpx.AsyncClient, zipcode: str, latitude: float, longitude: float
    ) -> str:
        params = {"lat": latitude, "lon": longitude}
        if self._config.excluded_sections:
            params["exclude"] = ",".join(self._config.excluded_sections)

        payload = await self._get_json(
            client,
            self._config.timezone_url,
            params,
            zipcode=zipcode,
            not_found=TimezoneNotFoundError,
        )
        timezone = payload.get("timezone")
        if timezone is None or timezone == "" or isinstance(timezone, bool):
            logger.warning("Timezone response for {} has no timezone", zipcode)
            raise TimezoneNotFoundError(zipcode)
        return str(timezone)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any],
        *,
        zipcode: str,
        not_found: type[LocationNotFoundError] | type[TimezoneNotFoundError],
    ) -> dict[str, Any]:
        query = dict(params)
        if self._config.api_key:
            query["appid"] = self._config.api_key

        try:
            resp = await client.get(url, params=query)
        except httpx.TimeoutException as exc:
            logger.warning("Provider call to {} timed out", url)
            raise ProviderUnavailableError(zipcode, "provider timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Provider call to {} failed: {}", url, type(exc).__name__)
            raise ProviderUnavailableError(
                zipcode, f"provider request failed ({type(exc).__name__})"
            ) from exc

        if resp.status_code == 404:
            raise not_found(zipcode)
        if resp.status_code >= 400:
            # The request URL carries the API key, so only the status is reported
            logger.warning("Provider {} answered {}", url, resp.status_code)
            raise ProviderUnavailableError(
                zipcode, f"provider responded with status {resp.status_code}"
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderUnavailableError(zipcode, "provider returned invalid JSON") from exc

        if not isinstance(payload, dict) or not payload:
            raise not_found(zipcode)
        return payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

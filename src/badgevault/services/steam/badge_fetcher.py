"""Async client for the two remote badge services.

Both public fetch operations are total: network failures, HTTP errors,
timeouts and malformed payloads are converted into a RemoteError, logged,
and replaced by the documented default payload (an empty record list or
an uncrafted CraftedInfo). Callers that need to know whether a call
failed use the ``*_outcome`` variants.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import aiohttp
from aiolimiter import AsyncLimiter
from pydantic import ValidationError

from badgevault.config.models.api_settings import APISettings
from badgevault.services.badge_models import BadgeVariant, CraftedInfo, EnrichmentRecord
from badgevault.services.steam.api_models import BadgeInfoResponse, SteamsetsBadgeList
from badgevault.shared.constants import LogContextKeys, LogOperationNames, NetworkConfig
from badgevault.shared.errors import ErrorCode, ErrorContext, RemoteError
from badgevault.shared.logging import log_api_call, log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Result of one remote call: the payload plus the failure, if any.

    On failure ``payload`` holds the default value for the call.
    """

    payload: T
    failure: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class BadgeDataFetcher:
    """Fetches badge list records and crafted status for an item.

    The aiohttp session is created lazily unless one is injected; an
    injected session is never closed by the fetcher.

    Example:
        >>> async with BadgeDataFetcher(settings.api) as fetcher:
        ...     records = await fetcher.fetch_enrichment(730)
        ...     normal = await fetcher.fetch_crafted_info(730, BadgeVariant.NORMAL)
    """

    def __init__(
        self,
        settings: APISettings | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        rate_limiter: AsyncLimiter | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            settings: Remote API settings (defaults if None)
            session: Optional shared aiohttp session
            rate_limiter: Optional limiter (built from settings if None)
        """
        self.settings = settings or APISettings()
        self._session = session
        self._owns_session = session is None
        self._rate_limiter = rate_limiter or AsyncLimiter(
            self.settings.requests_per_window,
            self.settings.rate_limit_window,
        )

    async def __aenter__(self) -> BadgeDataFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": NetworkConfig.USER_AGENT},
            )
            self._owns_session = True
            logger.debug("Created aiohttp session for badge fetcher")
        return self._session

    async def close(self) -> None:
        """Close the session if the fetcher created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _remote_error(
        self,
        code: ErrorCode,
        message: str,
        operation: str,
        item_id: int,
        original_error: Exception | None = None,
        **additional: Any,
    ) -> RemoteError:
        return RemoteError(
            code=code,
            message=message,
            context=ErrorContext(
                operation=operation,
                item_id=item_id,
                additional_data=additional or None,
            ),
            original_error=original_error,
        )

    def _as_remote_error(
        self, error: Exception, operation: str, item_id: int
    ) -> RemoteError:
        """Pass RemoteError through; wrap anything else the session raised."""
        if isinstance(error, RemoteError):
            return error
        return self._remote_error(
            ErrorCode.NETWORK_ERROR,
            f"Unexpected error during {operation}: {error!s}",
            operation,
            item_id,
            error,
            error_type=type(error).__name__,
        )

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        item_id: int,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one rate-limited request and decode its JSON body.

        Raises:
            RemoteError: On HTTP error status, network failure, timeout or
                an undecodable body
        """
        session = await self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
        start = time.perf_counter()

        async with self._rate_limiter:
            try:
                async with session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json_body,
                    timeout=timeout,
                ) as response:
                    status = response.status
                    log_api_call(
                        logger,
                        endpoint=url,
                        method=method,
                        status_code=status,
                        duration_ms=(time.perf_counter() - start) * 1000,
                        context={LogContextKeys.ITEM_ID: item_id},
                    )
                    if status in (401, 403):
                        raise self._remote_error(
                            ErrorCode.API_AUTHENTICATION_FAILED,
                            f"Authentication rejected by {url} (HTTP {status})",
                            operation,
                            item_id,
                            status_code=status,
                        )
                    if status >= 400:
                        raise self._remote_error(
                            ErrorCode.API_REQUEST_FAILED,
                            f"Request to {url} failed with HTTP {status}",
                            operation,
                            item_id,
                            status_code=status,
                        )
                    # Steam answers JSON with a text/html content type
                    return await response.json(content_type=None)

            except asyncio.TimeoutError as e:
                raise self._remote_error(
                    ErrorCode.API_TIMEOUT,
                    f"Request to {url} timed out",
                    operation,
                    item_id,
                    e,
                ) from e
            except aiohttp.ClientError as e:
                raise self._remote_error(
                    ErrorCode.NETWORK_ERROR,
                    f"Network error calling {url}: {e!s}",
                    operation,
                    item_id,
                    e,
                ) from e
            except ValueError as e:
                raise self._remote_error(
                    ErrorCode.API_INVALID_RESPONSE,
                    f"Response from {url} is not valid JSON: {e!s}",
                    operation,
                    item_id,
                    e,
                ) from e

    async def fetch_enrichment_outcome(
        self, item_id: int
    ) -> FetchOutcome[list[EnrichmentRecord]]:
        """Fetch the badge list for an item.

        Any shape mismatch in the response empties the whole list.

        Args:
            item_id: Item (app) id

        Returns:
            Outcome with the records in response order, or an empty list
        """
        operation = LogOperationNames.FETCH_ENRICHMENT
        headers = {
            "Content-Type": NetworkConfig.CONTENT_TYPE_JSON,
            "Accept": NetworkConfig.ACCEPT_JSON,
        }
        api_key = self.settings.steamsets_api_key.get_secret_value()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        start = time.perf_counter()
        try:
            data = await self._request_json(
                "POST",
                self.settings.steamsets_url,
                operation=operation,
                item_id=item_id,
                headers=headers,
                json_body={"appId": item_id},
            )
            try:
                parsed = SteamsetsBadgeList.model_validate(data)
                records = [badge.to_record() for badge in parsed.badges]
            except (ValidationError, TypeError, ValueError) as e:
                raise self._remote_error(
                    ErrorCode.API_INVALID_RESPONSE,
                    f"Unexpected badge list shape for item {item_id}",
                    operation,
                    item_id,
                    e,
                ) from e
        except Exception as e:
            error = self._as_remote_error(e, operation, item_id)
            log_operation_error(logger=logger, error=error, level=logging.WARNING)
            return FetchOutcome(payload=[], failure=error)

        log_operation_success(
            logger=logger,
            operation=operation,
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={LogContextKeys.RECORD_COUNT: len(records)},
            context={LogContextKeys.ITEM_ID: item_id},
        )
        return FetchOutcome(payload=records)

    async def fetch_enrichment(self, item_id: int) -> list[EnrichmentRecord]:
        """Fetch the badge list for an item; never raises."""
        outcome = await self.fetch_enrichment_outcome(item_id)
        return outcome.payload

    async def fetch_crafted_info_outcome(
        self, item_id: int, variant: BadgeVariant
    ) -> FetchOutcome[CraftedInfo]:
        """Fetch the crafted level of one badge variant.

        A response without a numeric ``badgedata.level`` counts as a
        failure and yields an uncrafted CraftedInfo.

        Args:
            item_id: Item (app) id
            variant: Normal or foil badge

        Returns:
            Outcome with the crafted status
        """
        operation = LogOperationNames.FETCH_CRAFTED
        url = f"{self.settings.badge_info_url.rstrip('/')}/{item_id}"
        params = (
            {NetworkConfig.FOIL_QUERY_PARAM: NetworkConfig.FOIL_QUERY_VALUE}
            if variant.is_foil
            else None
        )
        headers = {"Accept": NetworkConfig.ACCEPT_JSON}
        if self.settings.steam_cookies is not None:
            headers["Cookie"] = self.settings.steam_cookies.get_secret_value()

        start = time.perf_counter()
        try:
            data = await self._request_json(
                "GET",
                url,
                operation=operation,
                item_id=item_id,
                headers=headers,
                params=params,
            )
            try:
                level = BadgeInfoResponse.model_validate(data).level
            except ValidationError as e:
                raise self._remote_error(
                    ErrorCode.API_INVALID_RESPONSE,
                    f"Unexpected badge info shape for item {item_id}",
                    operation,
                    item_id,
                    e,
                    variant=variant,
                ) from e
            if level is None:
                raise self._remote_error(
                    ErrorCode.API_INVALID_RESPONSE,
                    f"Badge info for item {item_id} has no numeric level",
                    operation,
                    item_id,
                    variant=variant,
                )
        except Exception as e:
            error = self._as_remote_error(e, operation, item_id)
            log_operation_error(
                logger=logger,
                error=error,
                additional_context={LogContextKeys.VARIANT: variant.value},
                level=logging.WARNING,
            )
            return FetchOutcome(payload=CraftedInfo.none(), failure=error)

        log_operation_success(
            logger=logger,
            operation=operation,
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"crafted_level": level},
            context={LogContextKeys.ITEM_ID: item_id, LogContextKeys.VARIANT: variant.value},
        )
        return FetchOutcome(payload=CraftedInfo.from_level(level))

    async def fetch_crafted_info(self, item_id: int, variant: BadgeVariant) -> CraftedInfo:
        """Fetch the crafted status of one badge variant; never raises."""
        outcome = await self.fetch_crafted_info_outcome(item_id, variant)
        return outcome.payload


__all__ = ["BadgeDataFetcher", "FetchOutcome"]

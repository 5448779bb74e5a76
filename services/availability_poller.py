"""
Availability poller — waits until every recipe of an asset reports ready.

Fixed-interval polling against a single asset, bounded by an overall
wall-clock deadline measured from the first attempt.
"""

from __future__ import annotations

import time
from typing import Callable

from domain.decoding import decode_asset_status
from domain.models import AssetStatus, asset_id_from_urn
from ports.rest_client import RestClientPort
from shared_utils.constants import AssetEndpoints, Defaults, LogScope
from shared_utils.error_handler import PollingTimeoutError
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.POLLER)


class AvailabilityPoller:
    """Polls ``GET /assets/{id}`` until the asset is usable."""

    def __init__(
        self,
        rest_client: RestClientPort,
        interval: float = Defaults.POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = rest_client
        self._interval = interval
        self._sleep = sleep
        self._clock = clock

    def wait(self, asset_handle: str, timeout: float = Defaults.POLL_TIMEOUT_SECONDS) -> AssetStatus:
        """Block until all recipes are ready.

        Args:
            asset_handle: Asset URN (or bare id).
            timeout: Overall deadline in seconds.

        Returns:
            The first AssetStatus whose recipes are all ready.

        Raises:
            PollingTimeoutError: Deadline passed before the asset became ready.
            ProtocolError / TransportError: A status request failed.
        """
        asset_id = asset_id_from_urn(asset_handle)
        path = AssetEndpoints.ASSET_BY_ID.format(asset_id=asset_id)
        started = self._clock()
        attempt = 0

        while True:
            attempt += 1
            response = self._client.call(
                "GET", path, query={"fields": AssetEndpoints.STATUS_FIELDS}
            )
            status = decode_asset_status(response.body)
            if status.is_ready:
                logger.info("asset_available", asset=asset_handle, attempts=attempt)
                return status

            elapsed = self._clock() - started
            if elapsed >= timeout:
                logger.warning(
                    "asset_wait_timeout", asset=asset_handle, attempts=attempt, elapsed_seconds=elapsed
                )
                raise PollingTimeoutError(asset_handle, timeout, context={"attempts": attempt})

            logger.debug(
                "asset_not_ready",
                asset=asset_handle,
                attempt=attempt,
                recipes=[r.status for r in status.recipes or []],
            )
            self._sleep(self._interval)

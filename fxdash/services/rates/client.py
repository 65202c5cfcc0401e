"""
FX HTTP Client

Fetches the latest rate table for a base currency from the external FX
service. One GET per call; the response is expected to be a JSON object
with a `rates` mapping of code -> units per one base unit.

This client does NOT retry. A failed fetch is reported to the provider,
which keeps the previous snapshot; the next staleness check tries again.
"""

from collections.abc import Mapping
from typing import Optional

import requests

from fxdash.models.rates import clean_rate_table


class RateFetchError(Exception):
    """Rates could not be fetched or the response was unusable."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class ExchangeRateClient:
    """
    Client for an open.er-api style "latest rates" endpoint.

    The URL template must contain '{base}', e.g.
    https://open.er-api.com/v6/latest/{base}
    """

    def __init__(
        self,
        url_template: str = "https://open.er-api.com/v6/latest/{base}",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.url_template = url_template
        self.timeout = timeout
        self._session = session

    def url_for(self, base: str) -> str:
        return self.url_template.format(base=base.upper())

    def fetch_rates(self, base: str) -> dict[str, float]:
        """
        Fetch all rates expressed as 1 unit of `base` = X units of each currency.

        Returns:
            Cleaned rate table (valid codes, finite positive rates only)

        Raises:
            RateFetchError: On network error, timeout, non-2xx status,
                a body that is not JSON, or a body without a `rates` mapping
        """
        url = self.url_for(base)
        getter = self._session.get if self._session is not None else requests.get

        try:
            response = getter(
                url,
                timeout=self.timeout,
                headers={"Cache-Control": "no-store", "Accept": "application/json"},
            )
        except requests.RequestException as e:
            raise RateFetchError(f"Request failed: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            raise RateFetchError(f"HTTP {response.status_code} from FX service", url=url)

        try:
            data = response.json()
        except ValueError as e:
            raise RateFetchError(f"Response is not JSON: {e}", url=url) from e

        if not isinstance(data, Mapping):
            raise RateFetchError("Response is not a JSON object", url=url)

        if data.get("result") == "error":
            reason = data.get("error-type") or "unknown error"
            raise RateFetchError(f"FX service reported an error: {reason}", url=url)

        raw_rates = data.get("rates")
        if not isinstance(raw_rates, Mapping):
            raise RateFetchError("Response has no 'rates' mapping", url=url)

        return clean_rate_table(raw_rates)

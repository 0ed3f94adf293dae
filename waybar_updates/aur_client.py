"""
Client for the AUR RPC interface.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import threading
from typing import Iterable, List, Optional

import requests

from .constants import APP_USER_AGENT, AUR_RPC_URL, AUR_RPC_VERSION
from .exceptions import NetworkError
from .models import AurPackage
from .utils.logger import get_logger

logger = get_logger(__name__)


class AurClient:
    """Queries package info from the AUR in a single batched request."""

    def __init__(self, base_url: str = AUR_RPC_URL, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None) -> None:
        """
        Initialize the client.

        Args:
            base_url: RPC endpoint
            timeout: Request timeout in seconds, None to wait forever
            session: Session to reuse, a new one by default
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': APP_USER_AGENT,
            'Accept': 'application/json',
        })

        # Thread lock for session access
        self._session_lock = threading.Lock()

    def info(self, package_names: Iterable[str]) -> List[AurPackage]:
        """
        Fetch version records for the given packages.

        Packages unknown to the AUR are simply absent from the result.

        Args:
            package_names: Names to look up

        Returns:
            List of AurPackage records

        Raises:
            NetworkError: If the request fails or the response is malformed
        """
        names = list(package_names)
        if not names:
            return []

        params = [("v", AUR_RPC_VERSION), ("type", "info")]
        params.extend(("arg[]", name) for name in names)

        try:
            with self._session_lock:
                logger.debug(f"Querying AUR for {len(names)} packages")
                response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"HTTP request timed out: {e}")
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"HTTP request failed: {e}")
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"HTTP request failed: {e}")

        if response.status_code != requests.codes.ok:
            raise NetworkError(f"AUR API returned status code {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(f"failed to parse JSON response: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            error = data.get("error") if isinstance(data, dict) else None
            raise NetworkError(f"unexpected AUR response: {error or 'missing results'}")

        try:
            return [AurPackage.from_dict(record) for record in data["results"]]
        except (AttributeError, ValueError) as e:
            raise NetworkError(f"failed to parse JSON response: {e}")

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

"""HTTP sink for network snapshots with retry logic."""

import gzip
import json
import logging
import time
from typing import Dict, Any, Optional
from urllib.parse import urljoin

import requests

from . import __version__
from .config import AgentConfig

logger = logging.getLogger("netinfo-agent.transport")


class TransportError(Exception):
    """Base exception for transport errors."""
    pass


class AuthenticationError(TransportError):
    """Authentication failed (401/403)."""
    pass


class SnapshotPublisher:
    """Sends snapshot payloads to an ingest endpoint."""

    def __init__(self, api_url: str, config: AgentConfig, endpoint: str = "ingest"):
        self.api_url = api_url.rstrip("/") + "/"
        self.endpoint = endpoint
        self.config = config

    def _prepare_request(self, data: Dict[str, Any]) -> tuple[str, Dict[str, str], bytes]:
        """
        Build URL, headers and gzip-compressed JSON body.

        Returns:
            Tuple of (url, headers, body)
        """
        url = urljoin(self.api_url, self.endpoint)
        headers = {
            "Content-Type": "application/json",
            "Content-Encoding": "gzip",
            "User-Agent": f"netinfo-agent/{__version__}",
        }

        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"

        body = gzip.compress(json.dumps(data).encode("utf-8"))
        return url, headers, body

    def _execute_request(self, url: str, headers: Dict[str, str], body: bytes) -> Dict[str, Any]:
        """
        POST with retries on server errors, timeouts and connection errors.

        Raises:
            TransportError: On request failure
        """
        last_error: Optional[TransportError] = None

        for attempt in range(self.config.retry_attempts):
            try:
                response = requests.post(
                    url,
                    headers=headers,
                    data=body,
                    timeout=self.config.timeout,
                )

                if response.status_code == 200:
                    return response.json()

                elif response.status_code in (401, 403):
                    raise AuthenticationError(f"Authentication failed: {response.text}")

                elif response.status_code >= 500:
                    last_error = TransportError(f"Server error: {response.status_code}")

                else:
                    raise TransportError(f"Request failed: {response.status_code} - {response.text}")

            except requests.exceptions.Timeout:
                last_error = TransportError("Request timeout")

            except requests.exceptions.ConnectionError:
                last_error = TransportError("Connection error")

            except requests.exceptions.RequestException as e:
                raise TransportError(f"Request failed: {e}")

            logger.warning(f"Attempt {attempt + 1}/{self.config.retry_attempts} failed: {last_error}")
            if attempt + 1 < self.config.retry_attempts:
                time.sleep(self.config.retry_backoff ** attempt)

        # All retries exhausted
        raise last_error or TransportError("Request failed after all retries")

    def publish(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one snapshot payload.

        Args:
            payload: Snapshot envelope from build_payload()

        Returns:
            API response

        Raises:
            TransportError: On publish failure
        """
        url, headers, body = self._prepare_request(payload)
        logger.debug(f"Publishing {len(payload.get('network_ifaces', []))} interfaces to {url}")
        return self._execute_request(url, headers, body)

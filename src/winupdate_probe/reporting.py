"""Opsview REST client: log in, then set the service check state.

Each probe run logs in once and submits once. Nothing is retried; the
scheduler running the probe again is the retry.
"""

from __future__ import annotations

import http.client
import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request

from pydantic import BaseModel

from winupdate_probe.models import (
    LoginRequest,
    ProbeError,
    ProbeResult,
    Session,
    StatusPayload,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class AuthError(ProbeError):
    """Login failed or returned no token."""


class SubmitError(ProbeError):
    """The status submission did not reach the server."""


def normalize_server_url(server: str) -> str:
    """Return a base URL for the server; bare hostnames get https://."""
    server = server.strip().rstrip("/")
    if "://" not in server:
        server = f"https://{server}"
    return server


class OpsviewClient:
    """Minimal Opsview REST client."""

    def __init__(
        self,
        server: str,
        timeout: float = DEFAULT_TIMEOUT,
        verify_tls: bool = True,
    ):
        self.base_url = normalize_server_url(server)
        self.timeout = timeout
        self._ssl_context = ssl.create_default_context()
        if not verify_tls:
            self._ssl_context.check_hostname = False
            self._ssl_context.verify_mode = ssl.CERT_NONE

    def _post(self, url: str, body: BaseModel, headers: dict[str, str]) -> bytes:
        data = body.model_dump_json(exclude_none=True).encode("utf-8")
        req = urllib.request.Request(url, data=data, method="POST")
        req.add_header("Content-Type", "application/json")
        req.add_header("Accept", "application/json")
        for name, value in headers.items():
            req.add_header(name, value)
        with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as resp:
            return resp.read()

    def authenticate(self, username: str, password: str) -> Session:
        """Log in and return the session token.

        Raises:
            AuthError: On network/HTTP failure, timeout, a malformed
                response, or a response without a token.
        """
        url = f"{self.base_url}/rest/login"
        try:
            raw = self._post(url, LoginRequest(username=username, password=password), {})
        except urllib.error.HTTPError as exc:
            raise AuthError(f"Login to {self.base_url} failed: HTTP {exc.code} {exc.reason}") from exc
        except (urllib.error.URLError, OSError, http.client.HTTPException, ValueError) as exc:
            raise AuthError(f"Login to {self.base_url} failed: {exc}") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise AuthError(f"Login response is not valid JSON: {exc}") from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            raise AuthError("Login response contains no token")

        logger.debug("Authenticated to %s as %s", self.base_url, username)
        return Session(token=token, username=username)

    def submit(
        self,
        hostname: str,
        service_name: str,
        session: Session,
        result: ProbeResult,
    ) -> None:
        """Set the service check state on the server.

        Raises:
            SubmitError: On network/HTTP failure or timeout.
        """
        query = urllib.parse.urlencode({"hostname": hostname, "servicename": service_name})
        url = f"{self.base_url}/rest/detail?{query}"
        headers = {
            "X-Opsview-Username": session.username,
            "X-Opsview-Token": session.token,
        }
        try:
            self._post(url, StatusPayload.from_result(result), headers)
        except urllib.error.HTTPError as exc:
            raise SubmitError(
                f"Submitting {hostname}/{service_name} failed: HTTP {exc.code} {exc.reason}"
            ) from exc
        except (urllib.error.URLError, OSError, http.client.HTTPException, ValueError) as exc:
            raise SubmitError(f"Submitting {hostname}/{service_name} failed: {exc}") from exc

        logger.info(
            "Submitted %s for %s/%s", result.status.name, hostname, service_name,
        )

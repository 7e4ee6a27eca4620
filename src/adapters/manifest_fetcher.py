"""AASA retrieval over HTTPS.

Rules:
- Candidates are tried strictly in order: the well-known path, then the
  legacy root path. The first one that yields a body wins.
- One GET per candidate, no retries, no redirects (Apple does not follow them
  either).
- Every candidate gets its own client, closed before the next one is tried.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
from cryptography import x509

from adapters.http_client import build_client
from adapters.signature_verifier import SignatureVerifier
from core.config import AppSettings
from core.domain.errors import TransportError, TrustError
from core.domain.models import FetchResult

logger = logging.getLogger(__name__)

PKCS7_MIME = "application/pkcs7-mime"


def candidate_urls(domain: str) -> list[str]:
    return [
        f"https://{domain}/.well-known/apple-app-site-association",
        f"https://{domain}/apple-app-site-association",
    ]


def peer_certificate(response: httpx.Response) -> x509.Certificate | None:
    """Leaf certificate of the TLS connection that produced `response`.

    Only available while the response stream is still open.
    """

    stream = response.extensions.get("network_stream")
    if stream is None:
        return None
    ssl_object = stream.get_extra_info("ssl_object")
    if ssl_object is None:
        return None
    # Positional: low-level SSL objects reject the keyword form.
    der = ssl_object.getpeercert(True)
    if not der:
        return None
    try:
        return x509.load_der_x509_certificate(der)
    except ValueError:
        logger.warning("Unreadable peer certificate for %s", response.request.url)
        return None


class TrustManifestFetcher:
    """`ManifestSource` backed by httpx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        verifier: SignatureVerifier | None = None,
        transport: httpx.BaseTransport | None = None,
        cert_getter: Callable[[httpx.Response], x509.Certificate | None] = peer_certificate,
    ) -> None:
        self._settings = settings or AppSettings()
        self._verifier = verifier or SignatureVerifier()
        self._transport = transport
        self._cert_getter = cert_getter

    def fetch(self, domain: str) -> FetchResult:
        result = FetchResult(domain=domain)

        for url in candidate_urls(domain):
            try:
                data, done = self._fetch_candidate(domain, url, result)
            except TransportError as exc:
                result.diagnostics.append(f"[{domain}] Socket error: {exc}")
                return result
            if data is not None:
                result.data = data
            if done:
                return result

        result.diagnostics.append(f"[{domain}] Failed to retrieve AASA file")
        return result

    def _fetch_candidate(self, domain: str, url: str, result: FetchResult) -> tuple[bytes | None, bool]:
        client_kwargs: dict[str, Any] = {}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        try:
            with build_client(self._settings, **client_kwargs) as client:
                with client.stream("GET", url) as response:
                    cert = self._cert_getter(response)
                    body = response.read()
                    return self._handle_response(domain, url, response, body, cert, result)
        except httpx.RequestError as exc:
            # Connection failures and undecodable bodies alike.
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        except OSError as exc:
            raise TransportError(str(exc)) from exc

    def _handle_response(
        self,
        domain: str,
        url: str,
        response: httpx.Response,
        body: bytes,
        cert: x509.Certificate | None,
        result: FetchResult,
    ) -> tuple[bytes | None, bool]:
        """Return (data, done); `done` stops the search for this domain."""

        status = response.status_code
        if 300 <= status <= 399:
            logger.warning("%s cannot result in a redirect. Ignoring.", url)
            return None, False
        if status != 200:
            logger.info("Could not retrieve %s: %s %s. Ignoring.", url, status, response.reason_phrase)
            return None, False

        content_type = response.headers.get("content-type")
        if content_type is None:
            result.diagnostics.append(f"[{domain}] AASA Response does not contain a Content-type header")
            return None, True

        if PKCS7_MIME in content_type:
            try:
                data = self._verifier.verify(body, cert)
            except TrustError as exc:
                result.diagnostics.append(f"[{domain}] Failed to verify signed AASA file: {exc}")
                return None, True
        else:
            data = body

        logger.info("GET %s: %s %s (Content-type:%s) ✅", url, status, response.reason_phrase, content_type)
        return data, True

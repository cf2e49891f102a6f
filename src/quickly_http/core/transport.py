# src/quickly_http/core/transport.py
"""
Transport layer: sends a WireRequest over the network.

The default RequestsTransport keeps one requests.Session per thread,
so connection reuse and the cookie jar are never shared between threads.
Status codes are not interpreted here: any response is a result.
"""
import logging
import threading
import weakref
from http.cookiejar import Cookie
from typing import Dict, List, Optional, Protocol, Set
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter
from requests.cookies import RequestsCookieJar

from .assembler import WireRequest
from .exceptions import RequestCancelledError, classify_requests_exception

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can dispatch a WireRequest."""

    def send(self, wire: WireRequest) -> requests.Response:
        """
        Send one attempt.

        wire.cookies are not in wire.headers: the transport attaches them
        itself, together with any cookies it stores.

        Returns:
            Raw response (status, headers, cookies, content, close())

        Raises:
            TransportError: Network-level failure of this attempt
        """
        ...

    def close(self) -> None:
        ...


class RequestsTransport:
    """
    Transport on top of requests.Session.

    Features:
        - One lazily created session per thread
        - urllib3 level retries disabled (the executor owns retries)
        - Proxies applied to every request
        - Fails fast on a cancelled context

    Example:
        >>> transport = RequestsTransport(proxies={"https": "http://proxy:3128"})
        >>> raw = transport.send(wire)
    """

    def __init__(
        self,
        proxies: Optional[Dict[str, str]] = None,
        allow_redirects: bool = True,
    ):
        self.proxies: Dict[str, str] = dict(proxies or {})
        self.allow_redirects = allow_redirects
        self._local = threading.local()

        # Track all created sessions for close() (weak refs: threads may die)
        self._sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Session of the current thread, created on first access."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.add(weakref.ref(session, self._discard_ref))
        return session

    def _discard_ref(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._sessions.discard(ref)

    def send(self, wire: WireRequest) -> requests.Response:
        if wire.context.is_set():
            raise RequestCancelledError("Request context is cancelled", wire.url)

        payload = wire.body.read() if wire.body is not None else b""

        # Request cookies go through the jar so they merge with the session ones
        cookies = None
        if wire.cookies:
            cookies = RequestsCookieJar()
            for cookie in wire.cookies:
                cookies.set_cookie(cookie)

        try:
            return self.session.request(
                method=wire.method,
                url=wire.url,
                headers=dict(wire.headers),
                data=payload or None,
                cookies=cookies,
                timeout=wire.timeout,
                proxies=self.proxies or None,
                allow_redirects=self.allow_redirects,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, wire.url) from e

    def cookies_for(self, url: str) -> List[Cookie]:
        """
        Cookies from the current thread's jar that match the URL host.

        Args:
            url: URL to match

        Returns:
            List of cookies (domain-less cookies match every host)
        """
        host = (urlsplit(url).hostname or "").lower()
        result = []
        for cookie in self.session.cookies:
            domain = (cookie.domain or "").lstrip(".").lower()
            if not domain or host == domain or host.endswith("." + domain):
                result.append(cookie)
        return result

    def close(self) -> None:
        """Close sessions of all threads. Safe to call multiple times."""
        self._local.session = None
        with self._sessions_lock:
            refs = list(self._sessions)
            self._sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                try:
                    session.close()
                except Exception as e:
                    logger.debug(f"Ignoring error while closing session: {e}")

from typing import Dict, Optional

import requests

from ..errors import HttpStatusError, TransportError
from ..shared.logging import get_logger
from .interfaces import Transport

XML_MEDIA_TYPE = "application/xml"

logger = get_logger("transport")


class RequestsTransport(Transport):
    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def get(
        self,
        url: str,
        token: str,
        navigation_page: Optional[int] = None,
        navigation_page_size: Optional[int] = None,
    ) -> str:
        headers = self._headers(token)
        if navigation_page is not None and navigation_page_size is not None:
            headers["navigationPage"] = str(navigation_page)
            headers["navigationPageSize"] = str(navigation_page_size)
        return self._send("GET", url, headers)

    def post(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        method_override: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        headers = self._headers(token, method_override, content_type, accept)
        return self._send("POST", url, headers, body)

    def put(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        method_override: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        headers = self._headers(token, method_override, content_type, accept)
        return self._send("PUT", url, headers, body)

    def delete(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        headers = self._headers(token, content_type=content_type, accept=accept)
        return self._send("DELETE", url, headers, body)

    def _headers(
        self,
        token: str,
        method_override: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> Dict[str, str]:
        headers = {
            "Authorization": token,
            "Content-Type": content_type or XML_MEDIA_TYPE,
            "Accept": accept or XML_MEDIA_TYPE,
        }
        if method_override:
            headers["methodOverride"] = method_override
            headers["X-HTTP-Method-Override"] = method_override
        return headers

    def _send(self, method: str, url: str, headers: Dict[str, str], body: Optional[str] = None) -> str:
        data = body.encode("utf-8") if body is not None else None
        try:
            response = self._session.request(method, url, headers=headers, data=data, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code >= 400:
            raise HttpStatusError(response.status_code, url, response.text)
        return response.text or ""

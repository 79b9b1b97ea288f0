# http_utility.py - minimal HTTP client: GET / POST json / POST multipart, decoded into a type
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import requests

from utils.config import DEFAULT_TIMEOUT, HttpUtilityConfig
from utils.json_codec import JsonDecoder, encode_json
from utils.logger import get_logger, redact_headers
from utils.multipart import MultipartFormData

logger = get_logger("http-utility")

BODY_PREVIEW_CHARS = 2000


class HttpMethodType:
    GET = "GET"
    POST = "POST"


class HttpHeaderFields:
    accept = "accept"
    authorization = "authorization"
    content_type = "content-type"
    content_length = "content-length"


class NetworkError(Exception):
    """Transport failure, non-2xx status or undecodable payload."""

    def __init__(self, reason: Optional[str] = None, http_status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.http_status_code = http_status_code

    def __str__(self):
        if self.http_status_code is None:
            return str(self.reason)
        return f"{self.reason} (status {self.http_status_code})"


class HttpUtility:
    def __init__(self, token: Optional[str] = None, date_format: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT, base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self._token = token
        self._date_format = date_format
        self._timeout = timeout
        self._base_url = base_url.rstrip("/") if base_url else None
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: HttpUtilityConfig, session: Optional[requests.Session] = None):
        return cls(token=config.token, date_format=config.date_format,
                   timeout=config.timeout, base_url=config.base_url, session=session)

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def date_format(self) -> Optional[str]:
        return self._date_format

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def base_url(self) -> Optional[str]:
        return self._base_url

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ---------------- API ----------------
    def get_data(self, request_url: str, result_type: Any = Any) -> Any:
        req = self._create_request(HttpMethodType.GET, request_url)
        return self._send_and_decode(req, result_type)

    def post_data(self, request_url: str, request_body: Any, result_type: Any = Any) -> Any:
        req = self._create_request(HttpMethodType.POST, request_url)
        req.data = encode_json(request_body)
        req.headers[HttpHeaderFields.content_type] = "application/json"
        return self._send_and_decode(req, result_type)

    def post_multipart_form_data(self, request_url: str,
                                 multipart_body: Union[MultipartFormData, bytes],
                                 result_type: Any = Any, boundary: Optional[str] = None) -> Any:
        """
        POST a multipart/form-data body.

        `multipart_body` is either a MultipartFormData (boundary taken from it)
        or already-encoded bytes, which need the `boundary` they were built with.
        """
        if isinstance(multipart_body, MultipartFormData):
            content_type = multipart_body.content_type
            body = multipart_body.encode()
        else:
            if not boundary:
                raise ValueError("raw multipart body requires the boundary it was encoded with")
            content_type = f"multipart/form-data; boundary={boundary}"
            body = multipart_body

        req = self._create_request(HttpMethodType.POST, request_url)
        req.data = body
        req.headers[HttpHeaderFields.content_type] = content_type
        req.headers[HttpHeaderFields.content_length] = str(len(body))

        logger.debug("multipart form data => %s",
                     body[:BODY_PREVIEW_CHARS].decode("utf-8", errors="ignore"))
        return self._send_and_decode(req, result_type)

    # ---------------- HELPERS ----------------
    def _url(self, request_url: str) -> str:
        if self._base_url is None or urlsplit(request_url).scheme:
            return request_url
        return f"{self._base_url}/{request_url.lstrip('/')}"

    def _create_request(self, method: str, request_url: str) -> requests.Request:
        headers = {HttpHeaderFields.accept: "application/json"}
        if self._token:
            token = self._token
            headers[HttpHeaderFields.authorization] = token if token.lower().startswith("bearer ") else f"Bearer {token}"
        return requests.Request(method, self._url(request_url), headers=headers)

    def _send_and_decode(self, req: requests.Request, result_type: Any) -> Any:
        try:
            prepared = self.session.prepare_request(req)
        except requests.RequestException as e:
            logger.error("%s %s -> invalid request: %s", req.method, req.url, e)
            raise NetworkError(reason=str(e), http_status_code=None) from e
        logger.info("%s %s", prepared.method, prepared.url)
        logger.debug("REQ-HEADERS: %s", redact_headers(prepared.headers))

        try:
            resp = self.session.send(prepared, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("%s %s -> transport error: %s", prepared.method, prepared.url, e)
            raise NetworkError(reason=str(e), http_status_code=None) from e

        status = resp.status_code
        logger.info("%s %s -> status %s", prepared.method, prepared.url, status)

        if not 200 <= status < 300:
            raise NetworkError(reason=f"HTTP {status} {resp.reason or ''}".strip(), http_status_code=status)
        if not resp.content:
            raise NetworkError(reason="empty response body", http_status_code=status)

        decoder = JsonDecoder(date_format=self._date_format)
        try:
            return decoder.decode(result_type, resp.content)
        except ValueError as e:
            logger.warning("failed to decode response from %s: %s", prepared.url, e)
            raise NetworkError(reason=str(e), http_status_code=status) from e

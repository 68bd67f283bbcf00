"""
Fluent request builder.

HTTPClient накапливает конфигурацию запроса цепочкой вызовов и отправляет его
терминальным методом (get/post/.../do):

    >>> resp = (
    ...     HTTPClient()
    ...     .url("https://api.github.com")
    ...     .path("users", "cizixs")
    ...     .query("per_page", "10")
    ...     .header("Accept", "application/json")
    ...     .get()
    ... )
    >>> user = resp.as_json()

Builder НЕ потокобезопасен: один экземпляр - один поток. Для общего
набора настроек используйте derive_sharing_transport() / independent_copy().
"""

import http.cookiejar
from typing import Any, List, Optional, Tuple, Union

import requests
from requests.cookies import create_cookie
from requests.structures import CaseInsensitiveDict

from .body import (
    Body,
    EmptyBody,
    FilePart,
    FileSource,
    FormBody,
    JSONBody,
    MultipartBody,
    RawBody,
    default_filename,
)
from .config import ClientConfig, CONTENT_TYPE_HEADER, JSON_CONTENT_TYPE, FORM_CONTENT_TYPE
from .exceptions import InvalidConfigurationError
from .executor import Executor
from .logging import HTTPLogger
from .response import Response
from .utils import join_path, merge_query, split_base_url, validate_proxy_url, with_path_and_query
from ..utils.querystring import QueryEncodingError, encode_values

CookieArg = Union[http.cookiejar.Cookie, Tuple[str, str], None]


class HTTPClient:
    """
    Chainable HTTP request builder.

    Every configuration method returns the builder itself. Body setters
    (``json``, ``json_struct``, ``form``, ``body``, ``file``) replace each
    other: the last one called decides the body and its Content-Type.

    Sharing rules for copies:

    ==================  ==========================  =================
    field               derive_sharing_transport()  independent_copy()
    ==================  ==========================  =================
    url, scalars        copied                      copied
    path segments       copied                      copied
    headers, query      copied                      copied
    query structs       shared list                 copied list
    cookies             shared list                 copied list
    files               shared list                 copied list
    body                shared object               shared object
    session, logger     shared                      new session
    ==================  ==========================  =================

    Args:
        config: Defaults for the builder; ``ClientConfig.from_env()`` when omitted
        session: Transport to use; a new ``requests.Session`` when omitted
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None
    ):
        if config is None:
            config = ClientConfig.from_env()

        self._config = config
        self._url: Optional[str] = config.base_url
        self._path: List[str] = []
        self._query: dict = {}
        self._query_structs: List[Any] = []
        self._headers: CaseInsensitiveDict = CaseInsensitiveDict(config.headers)
        self._cookies: List[http.cookiejar.Cookie] = []
        self._auth: Tuple[str, str] = ("", "")
        self._body: Body = EmptyBody()
        self._files: List[FilePart] = []
        self._proxy: Optional[str] = config.proxy or None
        self._timeout: Optional[float] = config.timeout
        self._tls_handshake_timeout: Optional[float] = config.tls_handshake_timeout
        self._retries: int = config.retries
        self._debug: bool = config.debug

        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._logger = HTTPLogger(config.logging)
        self._executor = Executor(self._session, self._logger)

    # ==================== Target ====================

    def url(self, url: str) -> 'HTTPClient':
        """Set the base URL. Empty string is a no-op."""
        if url:
            self._url = url
        return self

    def path(self, *segments: Union[str, int]) -> 'HTTPClient':
        """
        Append path segments.

        Leading/trailing slashes do not matter, exactly one ``/`` ends up
        between segments. Empty segments are ignored; numbers are
        formatted with ``str()``.

        Example:
            >>> client.url("https://api.example.com/v1").path("users/", "/42")
            # -> https://api.example.com/v1/users/42
        """
        for segment in segments:
            if segment is None:
                continue
            segment = str(segment)
            if segment:
                self._path.append(segment)
        return self

    def query(self, key: str, value: Any) -> 'HTTPClient':
        """Set one query parameter; a second call with the same key overwrites."""
        self._query[key] = _query_value(value)
        return self

    def query_struct(self, value: Any) -> 'HTTPClient':
        """
        Register a structured value (mapping, dataclass, pydantic model) whose
        fields become query parameters.

        Encoding happens when the request is resolved; an unsupported value
        fails there with InvalidConfigurationError.
        """
        if value is not None:
            self._query_structs.append(value)
        return self

    # ==================== Headers, cookies, auth ====================

    def header(self, key: str, value: str) -> 'HTTPClient':
        """Set one header (case-insensitive key, last write wins)."""
        self._headers[key] = value
        return self

    def cookie(self, cookie: CookieArg) -> 'HTTPClient':
        """
        Append a cookie.

        Accepts an ``http.cookiejar.Cookie`` (see ``requests.cookies.create_cookie``)
        or a ``(name, value)`` pair. None is a no-op.
        """
        if cookie is None:
            return self
        if isinstance(cookie, tuple):
            name, value = cookie
            cookie = create_cookie(name, value)
        self._cookies.append(cookie)
        return self

    def basic_auth(self, username: str, password: str) -> 'HTTPClient':
        """
        Set basic auth credentials.

        Applied only when both parts are non-empty; empty strings disable it.
        """
        self._auth = (username or "", password or "")
        return self

    # ==================== Body ====================

    def json(self, text: str) -> 'HTTPClient':
        """Send ``text`` verbatim as a JSON body. Empty text is a no-op."""
        if not text:
            return self
        self._body = JSONBody(text=text)
        self._headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE
        return self

    def json_struct(self, value: Any) -> 'HTTPClient':
        """Encode ``value`` as the JSON body. None is a no-op."""
        if value is None:
            return self
        self._body = JSONBody(payload=value)
        self._headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE
        return self

    def form(self, value: Any) -> 'HTTPClient':
        """Encode ``value`` as an x-www-form-urlencoded body. None is a no-op."""
        if value is None:
            return self
        self._body = FormBody(value)
        self._headers[CONTENT_TYPE_HEADER] = FORM_CONTENT_TYPE
        return self

    def body(self, stream: Any) -> 'HTTPClient':
        """
        Send ``stream`` (file object, bytes or str) as-is.

        Content-Type is not touched. None is a no-op.
        """
        if stream is None:
            return self
        self._body = RawBody(stream)
        return self

    def file(
        self,
        source: FileSource,
        filename: Optional[str] = None,
        field_name: str = "file"
    ) -> 'HTTPClient':
        """
        Add one multipart/form-data part.

        Calls accumulate; parts are encoded in the order they were added.

        Args:
            source: File object, Path, bytes or str content
            filename: Part filename; derived from the source when omitted
            field_name: Form field name of the part

        Example:
            >>> client.file(Path("a.txt")).file(b"...", "b.bin", "attachment")
        """
        self._files.append(FilePart(
            field_name=field_name or "file",
            filename=filename or default_filename(source),
            source=source,
        ))
        self._body = MultipartBody(self._files)
        return self

    # ==================== Transport policy ====================

    def proxy(self, proxy: str) -> 'HTTPClient':
        """Route the request through ``proxy``. Empty string is a no-op."""
        if proxy:
            self._proxy = proxy
        return self

    def timeout(self, seconds: Optional[float]) -> 'HTTPClient':
        """Limit each attempt; 0 or None disables the limit."""
        self._timeout = seconds
        return self

    def tls_handshake_timeout(self, seconds: Optional[float]) -> 'HTTPClient':
        self._tls_handshake_timeout = seconds
        return self

    def retries(self, retries: int) -> 'HTTPClient':
        """Max attempts on transport errors; <= 1 sends once."""
        self._retries = retries
        return self

    def debug(self, enabled: bool = True) -> 'HTTPClient':
        """Log full request/response dumps for this builder."""
        self._debug = enabled
        return self

    # ==================== Copies ====================

    def derive_sharing_transport(self) -> 'HTTPClient':
        """
        Copy the builder, sharing transport and compound state.

        Simple maps (headers, query) and path segments are copied. Query
        structs, cookies, files, body and the session are shared by
        reference: appending a file on the copy is visible on the original.
        """
        clone = self._copy_scalars(self._session, self._logger)
        clone._owns_session = False
        clone._path = list(self._path)
        clone._query = dict(self._query)
        clone._headers = self._headers.copy()
        clone._query_structs = self._query_structs
        clone._cookies = self._cookies
        clone._files = self._files
        clone._body = self._body
        return clone

    # Name kept for callers that build from a configured base builder
    new = derive_sharing_transport

    def independent_copy(self) -> 'HTTPClient':
        """
        Copy the builder without sharing any mutable state.

        Gets its own ``requests.Session``. The body object is reused since a
        caller-supplied stream cannot be duplicated.
        """
        clone = self._copy_scalars(requests.Session(), self._logger)
        clone._owns_session = True
        clone._path = list(self._path)
        clone._query = dict(self._query)
        clone._headers = self._headers.copy()
        clone._query_structs = list(self._query_structs)
        clone._cookies = list(self._cookies)
        clone._files = list(self._files)
        if isinstance(self._body, MultipartBody):
            clone._body = MultipartBody(clone._files)
        else:
            clone._body = self._body
        return clone

    def _copy_scalars(self, session: requests.Session, logger: HTTPLogger) -> 'HTTPClient':
        clone = object.__new__(HTTPClient)
        clone._config = self._config
        clone._url = self._url
        clone._auth = self._auth
        clone._proxy = self._proxy
        clone._timeout = self._timeout
        clone._tls_handshake_timeout = self._tls_handshake_timeout
        clone._retries = self._retries
        clone._debug = self._debug
        clone._session = session
        clone._logger = logger
        clone._executor = Executor(session, logger)
        return clone

    # ==================== Resolution ====================

    def prepare(self, method: str) -> requests.PreparedRequest:
        """
        Resolve the accumulated configuration into a request.

        Steps, in order: body encoding (multipart forces its Content-Type),
        base request, path join, simple query, structured query, headers,
        cookies, basic auth.

        Raises:
            InvalidConfigurationError: bad method, base URL, proxy or query struct
            EncodingError: body could not be encoded
        """
        method = _validate_method(method)
        if self._proxy:
            validate_proxy_url(self._proxy)

        body = self._current_body()
        encoded = body.encode()

        base = split_base_url(self._url)

        path = base.path
        if self._path:
            path = join_path(base.path, *self._path)
            if not path.startswith("/"):
                path = "/" + path

        query = base.query
        if self._query or self._query_structs:
            structured = []
            for value in self._query_structs:
                try:
                    structured.append(encode_values(value))
                except QueryEncodingError as e:
                    raise InvalidConfigurationError(f"Cannot encode query struct: {e}") from e
            query = merge_query(base, self._query, structured)

        headers = CaseInsensitiveDict(self._headers)
        if isinstance(body, MultipartBody):
            headers[CONTENT_TYPE_HEADER] = encoded.content_type

        if self._cookies:
            pairs = "; ".join(f"{c.name}={c.value}" for c in self._cookies)
            existing = headers.get("Cookie")
            headers["Cookie"] = f"{existing}; {pairs}" if existing else pairs

        username, password = self._auth
        auth = (username, password) if username and password else None

        request = requests.Request(
            method=method,
            url=with_path_and_query(base, path, query),
            headers=dict(headers),
            data=encoded.data,
            auth=auth,
        )
        try:
            return request.prepare()
        except (requests.exceptions.InvalidURL, requests.exceptions.InvalidHeader,
                requests.exceptions.MissingSchema) as e:
            raise InvalidConfigurationError(f"Invalid request: {e}") from e

    def _current_body(self) -> Body:
        # Files added through a shared list count when nothing else set the body
        if isinstance(self._body, EmptyBody) and self._files:
            return MultipartBody(self._files)
        return self._body

    # ==================== Terminal verbs ====================

    def do(self, method: str, url: Optional[str] = None) -> Response:
        """
        Resolve and send the request.

        A non-empty ``url`` replaces the builder's base URL for this and
        every later call.

        Raises:
            InvalidConfigurationError, EncodingError: before anything is sent
            TransportError: every attempt failed
        """
        if url:
            self._url = url
        prepared = self.prepare(method)
        return self._executor.execute(
            prepared,
            retries=self._retries,
            timeout=self._timeout,
            tls_handshake_timeout=self._tls_handshake_timeout,
            proxy=self._proxy,
            debug=self._debug,
        )

    def get(self, url: Optional[str] = None) -> Response:
        return self.do("GET", url)

    def post(self, url: Optional[str] = None) -> Response:
        return self.do("POST", url)

    def put(self, url: Optional[str] = None) -> Response:
        return self.do("PUT", url)

    def patch(self, url: Optional[str] = None) -> Response:
        return self.do("PATCH", url)

    def delete(self, url: Optional[str] = None) -> Response:
        return self.do("DELETE", url)

    def head(self, url: Optional[str] = None) -> Response:
        return self.do("HEAD", url)

    def options(self, url: Optional[str] = None) -> Response:
        return self.do("OPTIONS", url)

    # ==================== Inspection ====================

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def files(self) -> List[FilePart]:
        """Pending multipart parts (the live list, shared with derived builders)."""
        return self._files

    @property
    def headers(self) -> CaseInsensitiveDict:
        return self._headers

    @property
    def current_url(self) -> Optional[str]:
        return self._url

    # ==================== Управление жизненным циклом ====================

    def close(self) -> None:
        """
        Close the session if this builder created it.

        Builders derived with derive_sharing_transport() never close the
        shared session.
        """
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<HTTPClient url={self._url!r} path={self._path!r}>"


def _validate_method(method: str) -> str:
    if not method or any(ch.isspace() for ch in method):
        raise InvalidConfigurationError(f"Invalid HTTP method: {method!r}")
    return method.upper()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)

"""
Иерархия исключений fluent-http.

Классификация:
- TransportError (retryable=True) - ошибка обмена, можно ретраить
- InvalidConfigurationError / EncodingError (fatal=True) - НЕ ретраить никогда,
  запрос даже не отправляется
- ReadError / DecodeError - ошибки извлечения тела ответа
"""

from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FluentHTTPError(Exception):
    """Базовое исключение fluent-http."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ПОДГОТОВКИ ЗАПРОСА (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class InvalidConfigurationError(FluentHTTPError):
    """
    Невалидная конфигурация запроса.

    Примеры:
    - Битый proxy URL
    - Base URL без схемы или хоста
    - QueryStruct, который нельзя превратить в key/value пары
    """
    fatal = True

class EncodingError(FluentHTTPError):
    """
    Не удалось закодировать тело запроса.

    Примеры:
    - Нечитаемый файл для multipart
    - Объект, который не сериализуется в JSON
    - Form значение неподдерживаемой формы
    """
    fatal = True

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(FluentHTTPError):
    """
    Обмен не состоялся: connect, DNS, TLS, таймаут.

    HTTP статус (даже 5xx) транспортной ошибкой НЕ является.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        attempts: Сколько попыток было сделано (заполняет Executor)
    """
    retryable = True

    def __init__(self, message: str, url: Optional[str] = None, attempts: int = 1):
        self.url = url
        self.attempts = attempts
        self.base_message = message
        super().__init__(self._format())

    def _format(self) -> str:
        msg = self.base_message
        if self.url:
            msg += f" (url: {self.url})"
        if self.attempts > 1:
            msg += f" after {self.attempts} attempt(s)"
        return msg

    def with_attempts(self, attempts: int) -> 'TransportError':
        """Проставить количество попыток и обновить сообщение."""
        self.attempts = attempts
        self.message = self._format()
        self.args = (self.message,)
        return self

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута (сек)
        timeout_type: Тип таймаута ('connect', 'read' или 'total')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout = timeout
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout"
            if timeout:
                msg += f": {timeout}s"
            msg += ")"

        super().__init__(msg, url)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    pass

class ProxyError(TransportError):
    """
    Ошибка прокси.

    Args:
        message: Сообщение
        url: URL
        proxy: Адрес прокси
    """

    def __init__(self, message: str, url: Optional[str] = None, proxy: Optional[str] = None):
        self.proxy = proxy
        msg = message
        if proxy:
            msg += f" (proxy: {proxy})"
        super().__init__(msg, url)

class SSLError(TransportError):
    """TLS handshake или проверка сертификата не прошли."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ЧТЕНИЯ ОТВЕТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResponseError(FluentHTTPError):
    """Базовая ошибка извлечения данных из ответа."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        msg = message
        if url:
            msg += f" (url: {url})"
        super().__init__(msg)

class ReadError(ResponseError):
    """
    Тело ответа не удалось дочитать.

    Пример: соединение оборвалось посреди тела.
    """
    pass

class DecodeError(ResponseError):
    """
    Тело прочитано, но это не JSON нужной формы.

    Отличается от ReadError: "не смогли прочитать" vs "не смогли разобрать".
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    proxy: Optional[str] = None
) -> FluentHTTPError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Таймаут попытки (для сообщения)
        proxy: Прокси (для сообщения)

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """

    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout, "connect")

    elif isinstance(exc, requests.exceptions.ReadTimeout):
        return TimeoutError("Request timeout", url, timeout, "read")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError(f"Proxy error: {exc}", url, proxy)

    elif isinstance(exc, requests.exceptions.SSLError):
        return SSLError(f"SSL error: {exc}", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
        requests.exceptions.InvalidHeader,
    )):
        return InvalidConfigurationError(f"Invalid request: {exc}")

    elif isinstance(exc, requests.exceptions.RequestException):
        # Остальное из requests - тоже сбой обмена
        return TransportError(f"Request failed: {exc}", url)

    else:
        # Неизвестная ошибка - оборачиваем
        return FluentHTTPError(str(exc))

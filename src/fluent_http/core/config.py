"""
Конфигурация по умолчанию для HTTPClient.

ClientConfig - immutable (frozen dataclass). Создаётся один раз (обычно из
окружения через ClientConfig.from_env()) и передаётся туда, где создаются
клиенты. Окружение читается только в этой точке.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Mapping, TYPE_CHECKING
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig

# Лимит на запрос по умолчанию, чтобы клиент не висел вечно,
# если удалённый сервер не отвечает.
DEFAULT_TIMEOUT: float = 3.0

# Переменная окружения, включающая debug режим.
# "1" (или "true") - включить, любое другое значение - выключить.
DEBUG_ENV = "FLUENT_HTTP_DEBUG"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
CONTENT_TYPE_HEADER = "Content-Type"


def _freeze_dict(d: Optional[Dict[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class ClientConfig:
    """
    Значения, которыми засевается новый HTTPClient.

    Args:
        base_url: Базовый URL (опционально)
        timeout: Лимит на одну попытку (сек); 0 или None = без лимита
        tls_handshake_timeout: Лимит на TLS handshake (сек), опционально
        retries: Сколько попыток делать при транспортной ошибке (<=1 - одна попытка)
        proxy: Proxy URL; пустой = брать из окружения (HTTP_PROXY и т.д.)
        debug: Логировать полные дампы запроса и ответа
        headers: Заголовки по умолчанию
        logging: Конфигурация логирования (None = только NullHandler пакета)

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com", retries=3)
        >>> config = ClientConfig.from_env()
    """
    base_url: Optional[str] = None
    timeout: Optional[float] = DEFAULT_TIMEOUT
    tls_handshake_timeout: Optional[float] = None
    retries: int = 0
    proxy: Optional[str] = None
    debug: bool = False
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка словарей."""
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")
        if self.tls_handshake_timeout is not None and self.tls_handshake_timeout < 0:
            raise ValueError("tls_handshake_timeout must be non-negative")
        if self.retries < 0:
            raise ValueError("retries must be non-negative")

        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> 'ClientConfig':
        """
        Собрать конфиг из переменных окружения FLUENT_HTTP_*.

        Args:
            env_file: Путь к .env файлу (опционально)
            **overrides: Явные значения, перекрывающие окружение

        Returns:
            ClientConfig instance

        Example:
            >>> # FLUENT_HTTP_DEBUG=1 FLUENT_HTTP_TIMEOUT=10
            >>> config = ClientConfig.from_env()
            >>> config.debug
            True
        """
        from .env_config import load_from_env
        return load_from_env(env_file=env_file, **overrides)

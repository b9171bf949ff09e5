"""
Резолвинг адресов интерфейсов.

Валидатор интерфейса получает resolver как зависимость:
- SocketResolver: DNS через socket.getaddrinfo с ограничением по времени
- StaticResolver: таблица имён в памяти (тесты, dry-run)

Пример использования:
    resolver = SocketResolver(timeout=2.0)
    addresses = resolver.resolve("router.example.com")  # ["192.0.2.10", ...]
"""

import ipaddress
import logging
import socket
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_RESOLVE_TIMEOUT
from .exceptions import ResolutionError

logger = logging.getLogger(__name__)


def is_literal_address(value: str) -> bool:
    """
    Проверяет, является ли строка литеральным IPv4/IPv6 адресом.

    Examples:
        >>> is_literal_address("10.0.0.1")
        True
        >>> is_literal_address("fe80::1")
        True
        >>> is_literal_address("router.example.com")
        False
    """
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def order_addresses(addresses: List[str], prefer_ipv4: bool = True) -> List[str]:
    """
    Убирает дубликаты (с сохранением порядка) и ставит IPv4 первыми.

    Args:
        addresses: Адреса в порядке от резолвера
        prefer_ipv4: IPv4 адреса вперёд

    Returns:
        List[str]: Упорядоченные адреса
    """
    unique = list(dict.fromkeys(addresses))
    if not prefer_ipv4:
        return unique
    return sorted(unique, key=lambda a: ipaddress.ip_address(a).version != 4)


class AddressResolver(ABC):
    """
    Базовый класс резолвера имён хостов.

    Реализации возвращают непустой список литеральных адресов
    или выбрасывают ResolutionError.
    """

    @abstractmethod
    def resolve(self, hostname: str) -> List[str]:
        """
        Получает адреса по имени хоста.

        Args:
            hostname: Имя хоста (FQDN)

        Returns:
            List[str]: Литеральные адреса

        Raises:
            ResolutionError: Имя не резолвится
        """
        pass


class SocketResolver(AddressResolver):
    """
    Резолвер через системный DNS (socket.getaddrinfo).

    getaddrinfo блокирует без таймаута, поэтому вызов выполняется
    в daemon-потоке: ожидание ограничено timeout секундами, а
    незавершённый поток не задерживает выход процесса.

    Attributes:
        timeout: Максимальное время ожидания (секунды)
        prefer_ipv4: IPv4 адреса возвращаются первыми
    """

    def __init__(self, timeout: float = DEFAULT_RESOLVE_TIMEOUT, prefer_ipv4: bool = True):
        self.timeout = timeout
        self.prefer_ipv4 = prefer_ipv4

    def _lookup(self, hostname: str) -> List[str]:
        infos = socket.getaddrinfo(hostname, None, proto=socket.IPPROTO_TCP)
        # sockaddr[0] у IPv6 может содержать zone (%eth0)
        return [info[4][0].split("%", 1)[0] for info in infos]

    def resolve(self, hostname: str) -> List[str]:
        outcome: Dict[str, Any] = {}

        def lookup() -> None:
            try:
                outcome["addresses"] = self._lookup(hostname)
            except Exception as e:
                outcome["error"] = e

        # daemon: зависший getaddrinfo не держит процесс при выходе
        worker = threading.Thread(target=lookup, name=f"resolve-{hostname}", daemon=True)
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            raise ResolutionError(
                f"lookup {hostname}: timed out after {self.timeout}s",
                hostname=hostname,
                timeout_seconds=self.timeout,
            )

        error = outcome.get("error")
        if isinstance(error, (socket.gaierror, UnicodeError, OSError)):
            raise ResolutionError(f"lookup {hostname}: {error}", hostname=hostname) from error
        if error is not None:
            raise error

        addresses = outcome["addresses"]
        if not addresses:
            raise ResolutionError(f"lookup {hostname}: no such host", hostname=hostname)
        logger.debug(f"lookup {hostname}: {addresses}")
        return order_addresses(addresses, self.prefer_ipv4)


class StaticResolver(AddressResolver):
    """
    Резолвер по фиксированной таблице имён.

    Пример:
        resolver = StaticResolver({"router.local": ["10.0.0.1"]})
    """

    def __init__(self, table: Optional[Dict[str, List[str]]] = None):
        self.table = {name.lower(): list(addrs) for name, addrs in (table or {}).items()}
        self.calls: List[str] = []

    def resolve(self, hostname: str) -> List[str]:
        self.calls.append(hostname)
        addresses = self.table.get(hostname.lower())
        if not addresses:
            raise ResolutionError(f"lookup {hostname}: no such host", hostname=hostname)
        return list(addresses)


def get_default_resolver(config=None) -> AddressResolver:
    """
    Создаёт резолвер по настройкам ValidationConfig.

    Args:
        config: ValidationConfig (None = настройки по умолчанию)

    Returns:
        AddressResolver: SocketResolver с таймаутом из конфигурации
    """
    if config is None:
        return SocketResolver()
    return SocketResolver(timeout=config.resolve_timeout, prefer_ipv4=config.prefer_ipv4)

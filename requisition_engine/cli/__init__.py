"""
CLI модуль requisition_engine.

Структура:
- utils.py: чтение/запись документов (YAML, JSON, STDIN)
- commands/: обработчики команд
  - validate.py: validate
  - stats.py: stats

Примеры использования:
    python -m requisition_engine validate routers.yaml
    python -m requisition_engine validate routers.json --format json --no-fqdn
    cat routers.yaml | python -m requisition_engine validate -
    python -m requisition_engine stats routers.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from .utils import (
    read_input,
    parse_document,
    load_requisition,
    dump_document,
    write_output,
)
from .commands import cmd_validate, cmd_stats

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="requisition_engine",
        description="Проверка и нормализация requisition перед provisioning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s validate routers.yaml
  %(prog)s validate routers.json --format json --output normalized.json
  %(prog)s validate - --no-fqdn < routers.yaml
  %(prog)s stats routers.yaml
        """,
    )

    # Общие аргументы
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: requisition_engine.yaml)",
    )

    # Подкоманды
    subparsers = parser.add_subparsers(dest="command", help="Команды")

    # === VALIDATE ===
    validate_parser = subparsers.add_parser(
        "validate",
        help="Проверить requisition и вывести нормализованную версию",
    )
    validate_parser.add_argument(
        "file",
        help="YAML/JSON файл с requisition ('-' для STDIN)",
    )
    validate_parser.add_argument(
        "--no-fqdn",
        action="store_true",
        help="Запретить FQDN вместо IP-адреса на интерфейсах",
    )
    validate_parser.add_argument(
        "--format",
        "-f",
        choices=["yaml", "json"],
        default=None,
        help="Формат вывода (default: из конфигурации)",
    )
    validate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Файл для результата (default: STDOUT)",
    )

    # === STATS ===
    stats_parser = subparsers.add_parser("stats", help="Статистика requisition")
    stats_parser.add_argument(
        "file",
        help="YAML/JSON файл с requisition ('-' для STDIN)",
    )
    stats_parser.add_argument(
        "--format",
        "-f",
        choices=["yaml", "json"],
        default=None,
        help="Формат вывода",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Главная функция CLI."""
    from ..config import load_config
    from ..core.exceptions import ConfigError
    from ..core.logging import LogConfig, setup_logging_from_config

    parser = setup_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config).app_config()
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(2)

    # Приоритет: -v флаг > конфигурация
    log_config = LogConfig.from_dict(app_config.logging.model_dump())
    if args.verbose:
        log_config.level = logging.DEBUG
    setup_logging_from_config(log_config)

    logger.debug(f"Run started (command={args.command})")

    if args.command == "validate":
        cmd_validate(args, app_config)
    elif args.command == "stats":
        cmd_stats(args, app_config)
    else:
        parser.print_help()


__all__ = [
    # Utils
    "read_input",
    "parse_document",
    "load_requisition",
    "dump_document",
    "write_output",
    # Commands
    "cmd_validate",
    "cmd_stats",
    # Entry points
    "setup_parser",
    "main",
]

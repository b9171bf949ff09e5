"""
Утилиты CLI.

Чтение requisition из файла или STDIN и вывод результата в YAML/JSON.
"""

import json
import sys
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import ParseError
from ..core.models import Requisition

logger = logging.getLogger(__name__)

STDIN = "-"


def read_input(source: str) -> str:
    """
    Читает содержимое файла или STDIN ("-").

    Raises:
        ParseError: Файл не найден или не читается
    """
    if source == STDIN:
        return sys.stdin.read()

    path = Path(source)
    if not path.exists():
        raise ParseError("File not found", source=source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read file: {e}", source=source) from e


def parse_document(text: str, source: str = STDIN) -> Dict[str, Any]:
    """
    Разбирает YAML или JSON документ.

    Файлы .json читаются json.loads, остальное через yaml.safe_load
    (JSON без расширения тоже разбирается как YAML).

    Raises:
        ParseError: Документ некорректен или не является mapping
    """
    is_json = source.lower().endswith(".json")
    try:
        data = json.loads(text) if is_json else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ParseError(f"Invalid {'JSON' if is_json else 'YAML'} document: {e}", source=source) from e

    if not isinstance(data, dict):
        raise ParseError("Requisition document must be a mapping", source=source)
    return data


def load_requisition(source: str) -> Requisition:
    """
    Загружает requisition из файла или STDIN.

    Args:
        source: Путь к файлу или "-"

    Returns:
        Requisition: Дерево requisition (ещё не проверенное)

    Raises:
        ParseError: Файл не читается или имеет неверную структуру
    """
    data = parse_document(read_input(source), source)
    try:
        requisition = Requisition.from_dict(data)
    except ParseError as e:
        e.source = source
        e.details["source"] = source
        raise
    logger.debug(f"Загружен requisition {requisition.name!r}: {len(requisition.nodes)} узлов")
    return requisition


def dump_document(data: Dict[str, Any], fmt: str = "yaml", indent: int = 2) -> str:
    """
    Сериализует словарь в YAML или JSON.

    Args:
        data: Данные
        fmt: "yaml" или "json"
        indent: Отступ

    Returns:
        str: Текст документа
    """
    if fmt == "json":
        return json.dumps(data, indent=indent or None, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, indent=indent or 2)


def write_output(text: str, output: Optional[str] = None) -> None:
    """Пишет текст в файл или STDOUT."""
    if not output or output == STDIN:
        sys.stdout.write(text)
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Результат сохранён: {path}")

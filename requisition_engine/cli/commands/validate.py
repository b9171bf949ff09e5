"""
Команда validate.

Проверка requisition из файла и вывод нормализованного документа.
"""

import sys
import logging

from ...core.domain import normalize
from ...core.exceptions import ParseError, RequisitionValidationError, format_error_for_log
from ..utils import dump_document, load_requisition, write_output

logger = logging.getLogger(__name__)


def cmd_validate(args, app_config) -> None:
    """
    Проверяет requisition и выводит нормализованную версию.

    Значения по умолчанию заполнены, FQDN заменены адресами.
    При ошибке выводит причину и завершает процесс с кодом 1.
    """
    validation_config = app_config.validation
    if args.no_fqdn:
        validation_config = validation_config.model_copy(update={"allow_fqdn": False})

    try:
        requisition = load_requisition(args.file)
    except ParseError as e:
        logger.error(format_error_for_log(e))
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)

    try:
        normalized = normalize(requisition, config=validation_config)
    except RequisitionValidationError as e:
        logger.error(format_error_for_log(e))
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Requisition {normalized.name} is valid ({len(normalized.nodes)} nodes)")

    fmt = args.format or app_config.output.default_format
    text = dump_document(normalized.to_dict(style=fmt), fmt, app_config.output.indent)
    write_output(text, args.output)

"""
Команда stats.

Статистика requisition из файла: количество узлов и foreign ID.
"""

import sys
import logging

from ...core.exceptions import ParseError, format_error_for_log
from ..utils import dump_document, load_requisition, write_output

logger = logging.getLogger(__name__)


def cmd_stats(args, app_config) -> None:
    """Выводит RequisitionStats без проверки содержимого."""
    try:
        requisition = load_requisition(args.file)
    except ParseError as e:
        logger.error(format_error_for_log(e))
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)

    fmt = args.format or app_config.output.default_format
    text = dump_document(requisition.stats().to_dict(style=fmt), fmt, app_config.output.indent)
    write_output(text)

"""
Точка входа для запуска модуля.

Позволяет запускать утилиту как:
    python -m requisition_engine [команда] [опции]

Примеры:
    python -m requisition_engine validate routers.yaml
    python -m requisition_engine stats routers.yaml
"""

from .cli import main

if __name__ == "__main__":
    main()

"""로깅 설정 — 콘솔 핸들러 1개, 앱 시작 시 한 번 호출.

Logging setup, called once from the application lifespan.
"""

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """루트 로거 구성 — Configure the root logger with a single stderr handler."""
    root_logger = logging.getLogger()

    # 중복 로그 방지 — Clear existing handlers to prevent duplicate logs
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

import logging
import sys

from perps_analytics.config.settings import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()

def setup_logging(name: str = "perps_analytics") -> logging.Logger:
    """
    統一的日誌配置。
    輸出到 Console (Stdout)。
    """
    logger = logging.getLogger(name)

    # 防止重複添加 Handler
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    return logger

# 預設 Logger
logger = setup_logging()

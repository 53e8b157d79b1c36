import sys
from loguru import logger
from pathlib import Path
from typing import Optional

_configured = False

# Keys every record carries, so agents can bind only what they know.
_DEFAULT_CONTEXT = {
    "story": "-",
    "section": "-",
    "agent": "-",
}


def _inject_default_context(record: dict) -> None:
    extra = record["extra"]
    for key, value in _DEFAULT_CONTEXT.items():
        extra.setdefault(key, value)


def setup_logger(log_level: str = "INFO", log_file: Optional[Path] = None):
    """Configure loguru sinks for CLI runs.

    Args:
        log_level: Level for the console sink.
        log_file: Optional file that receives everything down to DEBUG,
            including prompt and response previews.
    """
    global _configured

    if _configured and log_file is None:
        return logger

    logger.remove()
    logger.configure(patcher=_inject_default_context)

    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> "
            "| story={extra[story]} section={extra[section]} agent={extra[agent]} "
            "| <level>{message}</level>"
        ),
        level=log_level,
        colorize=True,
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} "
                "| story={extra[story]} section={extra[section]} agent={extra[agent]} - {message}"
            ),
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
        )

    _configured = True
    return logger

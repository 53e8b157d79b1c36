from .logger import setup_logger
from .text import parse_json_response, tail_window, preview

__all__ = ["setup_logger", "parse_json_response", "tail_window", "preview"]

from .logging_setup import setup_logging, get_logger, log_operation

__all__ = ["setup_logging", "get_logger", "log_operation"]

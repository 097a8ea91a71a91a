from .loading_handler import LoadingHandler, LoggingLoadingHandler

__all__ = ["LoadingHandler", "LoggingLoadingHandler"]

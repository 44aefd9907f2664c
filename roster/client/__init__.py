from roster.client.api import StudentsApi
from roster.client.coordinator import LoggingNotifier, Pagination, QueryCoordinator
from roster.client.debounce import Debouncer

__all__ = [
    "Debouncer",
    "LoggingNotifier",
    "Pagination",
    "QueryCoordinator",
    "StudentsApi",
]

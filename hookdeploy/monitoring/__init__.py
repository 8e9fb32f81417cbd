from .logs_storage import LogsStorage, GLOBAL_SCOPE
from .event_logger import EventLogger

__all__ = ['LogsStorage', 'EventLogger', 'GLOBAL_SCOPE']

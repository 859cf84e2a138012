import datetime
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

from litero.utils.logger import get_logger

logger = get_logger(__name__)

INFO = "info"
ERROR = "error"


@dataclass(frozen=True)
class ProgressEvent:
    message: str
    status: str = INFO
    force: bool = False
    timestamp: datetime.datetime = field(default_factory=datetime.datetime.now)

    def formatted(self) -> str:
        return f"{self.timestamp.strftime('%Y-%m-%d %I:%M:%S.%f')[:-3]} {self.timestamp.strftime('%p')} - {self.message}"


ProgressListener = Callable[[ProgressEvent], None]


class ProgressStream:
    """
    Ordered record of what retrieval did, handed to story and series documents.

    Each event is kept, logged and passed on to the listener, if there is one.
    A listener that raises is logged and otherwise ignored so narration never
    interrupts a download.
    """

    def __init__(self, listener: Optional[ProgressListener] = None):
        self.events: List[ProgressEvent] = []
        self._listener = listener

    def emit(self, message: str, status: str = INFO, force: bool = False) -> ProgressEvent:
        event = ProgressEvent(message=message, status=status, force=force)
        self.events.append(event)
        if status == ERROR:
            logger.warning(message)
        else:
            logger.debug(message)
        if self._listener:
            try:
                self._listener(event)
            except Exception as e:
                logger.error(f"Progress listener failed: {e}", exc_info=True)
        return event

    def error(self, message: str, force: bool = True) -> ProgressEvent:
        return self.emit(message, status=ERROR, force=force)

    @property
    def messages(self) -> List[str]:
        return [event.message for event in self.events]

    def __iter__(self) -> Iterator[ProgressEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

import logging
from dataclasses import dataclass
from typing import List, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Transient user-facing messages (toasts)"""

    def success(self, title: str, description: str = "") -> None: ...

    def error(self, title: str, description: str = "") -> None: ...


class LoggingNotifier:
    """Default notifier for headless use"""

    def success(self, title: str, description: str = "") -> None:
        logger.info(f"{title}: {description}" if description else title)

    def error(self, title: str, description: str = "") -> None:
        logger.error(f"{title}: {description}" if description else title)


@dataclass
class Notice:
    level: str
    title: str
    description: str = ""


class RecordingNotifier:
    """Keeps notices in memory for a UI to drain"""

    def __init__(self):
        self.notices: List[Notice] = []

    def success(self, title: str, description: str = "") -> None:
        self.notices.append(Notice("success", title, description))

    def error(self, title: str, description: str = "") -> None:
        self.notices.append(Notice("error", title, description))

    @property
    def errors(self) -> List[Notice]:
        return [n for n in self.notices if n.level == "error"]

    def clear(self) -> None:
        self.notices.clear()

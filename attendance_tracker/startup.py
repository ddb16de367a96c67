import asyncio
import enum
from typing import Awaitable, Callable, Optional

from attendance_tracker.exceptions import StartupFailed
from attendance_tracker.utils.logging import get_logger

logger = get_logger(__name__)


class StartupState(str, enum.Enum):
    CONNECTING = "connecting"
    RETRYING = "retrying"
    READY = "ready"
    FAILED = "failed"


class StartupSupervisor:
    """Runs the database bootstrap with a fixed retry budget.

    Connecting -> (Retrying -> Connecting)* -> Ready | Failed. The HTTP
    listener is only bound once the supervisor reaches Ready.
    """

    def __init__(
        self,
        bootstrap: Callable[[], Awaitable[None]],
        max_attempts: int = 3,
        retry_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        target: str = "",
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.bootstrap = bootstrap
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep
        self.target = target
        self.state: Optional[StartupState] = None
        self.attempts = 0

    async def run(self) -> None:
        last_error: Optional[Exception] = None

        while self.attempts < self.max_attempts:
            self.state = StartupState.CONNECTING
            self.attempts += 1
            try:
                await self.bootstrap()
            except Exception as exc:
                last_error = exc
                logger.error("Database connection failed: %s", exc)
                if self.target:
                    logger.error("Database target: %s", self.target)
            else:
                self.state = StartupState.READY
                return

            logger.warning(
                "Retrying database connection... (%d/%d)",
                self.attempts,
                self.max_attempts,
            )
            if self.attempts < self.max_attempts:
                self.state = StartupState.RETRYING
                await self.sleep(self.retry_delay)

        self.state = StartupState.FAILED
        logger.critical(
            "Failed to connect to database after %d attempts", self.max_attempts
        )
        raise StartupFailed(
            f"Database unreachable after {self.max_attempts} attempts"
        ) from last_error

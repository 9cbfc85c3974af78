from .service import RecoveryService
from .tokens import ResetTicket, ResetTokenGenerator
from .notifier import LoggingNotifier, ResetNotifierPort, ResponseNotifier, make_notifier
from .deps import get_recovery_service
from .routes import router as recovery_router

__all__ = [
    "RecoveryService",
    "ResetTicket",
    "ResetTokenGenerator",
    "LoggingNotifier",
    "ResetNotifierPort",
    "ResponseNotifier",
    "make_notifier",
    "get_recovery_service",
    "recovery_router",
]

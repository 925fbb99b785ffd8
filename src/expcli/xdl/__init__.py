"""Project library collaborator contracts and records."""

from expcli.xdl.contracts import (
    Analytics,
    Binaries,
    Detach,
    Doctor,
    LogHub,
    LogSink,
    LogStream,
    ProjectManager,
    Toolkit,
    UserManager,
    VersionChecker,
)
from expcli.xdl.records import (
    LogLevel,
    LogRecord,
    NotificationCode,
    ProjectStatus,
    PublishResult,
    Severity,
    UpdateState,
    User,
    VersionInfo,
)

__all__ = [
    "Analytics",
    "Binaries",
    "Detach",
    "Doctor",
    "LogHub",
    "LogLevel",
    "LogRecord",
    "LogSink",
    "LogStream",
    "NotificationCode",
    "ProjectManager",
    "ProjectStatus",
    "PublishResult",
    "Severity",
    "Toolkit",
    "UpdateState",
    "User",
    "UserManager",
    "VersionChecker",
    "VersionInfo",
]

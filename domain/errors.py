from __future__ import annotations


class JobOpsError(Exception):
    """Base class for errors raised by the tracker."""


class StoreNotReadyError(JobOpsError):
    """Raised when a mutation is attempted before the initial load finished."""


class StorageError(JobOpsError):
    """Local durable storage could not be read or written."""


class RemoteMirrorError(JobOpsError):
    """The remote mirror could not be reached or rejected the request."""


class MalformedResponseError(RemoteMirrorError):
    """The remote mirror answered with something that is not a list of jobs."""


class SettingsValidationError(JobOpsError, ValueError):
    """A settings value was rejected before being persisted."""


__all__ = [
    "JobOpsError",
    "StoreNotReadyError",
    "StorageError",
    "RemoteMirrorError",
    "MalformedResponseError",
    "SettingsValidationError",
]

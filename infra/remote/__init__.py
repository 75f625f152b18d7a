from .http_remote_mirror import HttpRemoteMirror

__all__ = ["HttpRemoteMirror"]

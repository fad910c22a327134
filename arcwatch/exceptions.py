"""
Custom exception hierarchy for arcwatch.

Every error raised by arcwatch derives from :class:`ArcwatchError` and
carries an optional ``details`` mapping that is rendered after the message,
e.g. ``failed to fetch repo x/y (cause=HTTP 404 error for repos/x/y)``.

Only :class:`TraversalError` and :class:`ConfigError` abort a run; every
other error is contained to the manifest or repository that raised it.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def _details(**values: Any) -> Dict[str, Any]:
    """Build a details mapping, dropping keys whose value is ``None``."""
    return {key: value for key, value in values.items() if value is not None}


def _truncate(text: Optional[str], max_length: int = 200) -> Optional[str]:
    """Shorten response bodies before they end up in messages and logs."""
    if text is None or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def _describe(error: Optional[BaseException]) -> Optional[str]:
    return str(error) if error is not None else None


class ArcwatchError(Exception):
    """Base exception for all arcwatch errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata, shown as ``key=value`` pairs.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({pairs})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


class ConfigError(ArcwatchError):
    """A configuration file is missing, unreadable or invalid."""

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, _details(path=config_path, option=option))
        self.config_path = config_path
        self.option = option


class FileOperationError(ArcwatchError):
    """A filesystem operation failed.

    Args:
        message: Error description.
        file_path: Path of the file or directory involved.
        operation: ``"read"`` or ``"walk"``.
        original_error: The ``OSError`` (or decode error) behind the failure.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            _details(
                path=file_path,
                operation=operation,
                original_error=_describe(original_error),
            ),
        )
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class TraversalError(FileOperationError):
    """The directory tree cannot be walked. Fatal for the whole run."""

    __slots__ = ()


class ManifestReadError(FileOperationError):
    """A single manifest cannot be read. The manifest is skipped."""

    __slots__ = ()


class ManifestParseError(ArcwatchError):
    """A ``go.mod`` file is not valid go.mod syntax.

    Args:
        message: Error description.
        line_number: 1-based line where parsing failed.
        line_content: The offending line, stripped.
        file_path: Display path of the manifest.
    """

    __slots__ = ("line_number", "line_content", "file_path")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            _details(line=line_number, content=line_content, file=file_path),
        )
        self.line_number = line_number
        self.line_content = line_content
        self.file_path = file_path


class InvalidIdentityError(ArcwatchError):
    """A repository identity is not of the form ``owner/name``."""

    __slots__ = ("identity",)

    def __init__(self, message: str, *, identity: Optional[str] = None) -> None:
        super().__init__(message, _details(identity=identity))
        self.identity = identity


class NetworkError(ArcwatchError):
    """An HTTP request failed or returned an unusable response.

    Args:
        message: Error description.
        url: Request path or URL.
        status_code: HTTP status code, when a response was received.
        response_body: Raw response body; truncated in ``details``.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            _details(
                url=url,
                status_code=status_code,
                response=_truncate(response_body),
            ),
        )
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class FetchError(ArcwatchError):
    """The status of a repository could not be retrieved.

    Failures are never cached, so the next lookup retries the request.
    """

    __slots__ = ("repository", "original_error")

    def __init__(
        self,
        message: str,
        *,
        repository: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, _details(cause=_describe(original_error)))
        self.repository = repository
        self.original_error = original_error

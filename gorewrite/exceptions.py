"""Custom exceptions for go-rewrite-build."""

from __future__ import annotations


class RewriteBuildError(Exception):
    """Base exception for all go-rewrite-build errors."""


class ConfigError(RewriteBuildError):
    """Raised for invalid arguments, before any filesystem mutation."""


class TrimPathError(ConfigError):
    """Raised when a trim rule would rewrite a path to nothing."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"trimpath target must not be empty: {source}")


class PathResolutionError(RewriteBuildError):
    """Raised when a relative path cannot be made absolute."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"cannot resolve absolute path of {path!r}: {reason}")


class DirectoryListError(RewriteBuildError):
    """Raised when a source directory cannot be listed during an overlay copy."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"list file of {path} error: {reason}")


class CommandError(RewriteBuildError):
    """Raised when a shell script exits non-zero.

    The message embeds the whole script and both captured streams so the
    failure can be reproduced by hand.
    """

    def __init__(
        self,
        script: str,
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ):
        self.script = script
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if reason is None:
            reason = f"exit status {returncode}"
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        return (
            f"running cmd error: cmd {self.script} {self.reason} "
            f"stdout:{self.stdout} stderr:{self.stderr}"
        )


class DecodeError(CommandError):
    """Raised when a successful command's stdout cannot be decoded."""

    def __init__(self, script: str, stdout: str, stderr: str, target: str, reason: str):
        self.target = target
        super().__init__(script, 0, stdout, stderr, reason=reason)

    def _format(self) -> str:
        return f"parse command output to {self.target} error: {self.reason}"


class BuildError(CommandError):
    """Raised when the compiler invocation fails."""

    def __init__(self, output: str, cause: CommandError):
        self.output = output
        super().__init__(
            cause.script, cause.returncode, cause.stdout, cause.stderr, reason=cause.reason
        )

    def _format(self) -> str:
        return f"build {self.output} failed: {super()._format()}"

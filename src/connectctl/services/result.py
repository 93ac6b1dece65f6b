"""Result envelope handed from ConnectionService to the CLI.

The engine raises :class:`ConnectctlError` subclasses; the service layer
catches them at the boundary and reports them here, keyed by the error's
stable ``code``. Success and failure are mutually exclusive: a result
either carries ``data`` or an ``error``, never both.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from connectctl.domain.errors import ConnectctlError


class ServiceError(BaseModel):
    """Why an operation failed, plus the arguments it was called with."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ConnectctlError, **detail: Any) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail=detail)


class ServiceResult(BaseModel):
    """Outcome of one ConnectionService operation, named by ``op``."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: ServiceError | None = None

    @model_validator(mode="after")
    def _error_iff_failed(self) -> ServiceResult:
        if self.ok and self.error is not None:
            msg = f"Successful {self.op!r} result cannot carry an error"
            raise ValueError(msg)
        if not self.ok and self.error is None:
            msg = f"Failed {self.op!r} result needs an error"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, op: str, **data: Any) -> ServiceResult:
        return cls(ok=True, op=op, data=data)

    @classmethod
    def failure(cls, op: str, exc: ConnectctlError, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc, **detail))

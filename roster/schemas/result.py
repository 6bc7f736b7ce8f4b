from typing import Any

from pydantic import BaseModel

from ..errors import AppError, error_payload


class OperationResult(BaseModel):
    """Typed outcome of a roster operation. Failures never raise past it."""

    ok: bool
    status_code: int = 200
    data: Any = None
    error: dict[str, Any] | None = None

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, exc: AppError) -> "OperationResult":
        return cls(
            ok=False,
            status_code=exc.status_code,
            error=error_payload(exc.code, exc.message, exc.details)["error"],
        )

    @property
    def error_code(self) -> str | None:
        return self.error["code"] if self.error else None

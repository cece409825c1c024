from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


class PayloadValidationError(Exception):
    def __init__(self, schema_name: str, issues: list[ValidationIssue]) -> None:
        self.schema_name = schema_name
        self.issues = issues
        paths = ", ".join(issue.path for issue in issues) or "<root>"
        super().__init__(f"{schema_name} validation failed at: {paths}")

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]

    def to_details(self) -> list[dict[str, str]]:
        return [{"path": issue.path, "message": issue.message} for issue in self.issues]


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    value: ModelT | None = None
    error: PayloadValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _format_path(location: tuple[int | str, ...]) -> str:
    if not location:
        return "<root>"
    return ".".join(str(part) for part in location)


def issues_from_validation_error(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(path=_format_path(tuple(error["loc"])), message=error["msg"])
        for error in exc.errors()
    ]


def validate_payload(model: type[ModelT], payload: object) -> ValidationResult[ModelT]:
    try:
        return ValidationResult(value=model.model_validate(payload))
    except ValidationError as exc:
        return ValidationResult(
            error=PayloadValidationError(model.__name__, issues_from_validation_error(exc)),
        )


def parse_payload(model: type[ModelT], payload: object) -> ModelT:
    result = validate_payload(model, payload)
    if result.error is not None:
        raise result.error
    assert result.value is not None
    return result.value


__all__ = [
    "PayloadValidationError",
    "ValidationIssue",
    "ValidationResult",
    "issues_from_validation_error",
    "parse_payload",
    "validate_payload",
]

"""이슈 페이로드 검증기.

Issue payload validator — Normalizes and validates create/update payloads.

Validation is a pure function of the payload: it never touches storage and
never raises for bad input. Each call returns either a normalized record or a
ValidationFailure carrying every field error found, tagged by FieldErrorKind.

Usage:
    result = validate_create({"title": "Pothole", ...})
    if isinstance(result, ValidationFailure):
        ...  # result.errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.enums import (
    DEFAULT_REPORTER,
    DESCRIPTION_MAX_LENGTH,
    LOCATION_MAX_LENGTH,
    REPORTED_BY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    IssuePriority,
    IssueStatus,
)


class FieldErrorKind(str, Enum):
    """필드 오류 종류 — Field-level error kinds."""

    REQUIRED = "required"
    TOO_LONG = "too_long"
    INVALID_CHOICE = "invalid_choice"
    INVALID_TYPE = "invalid_type"
    EMPTY_UPDATE = "empty_update"


@dataclass(frozen=True)
class FieldError:
    field: str  # 요청 필드 이름 (Wire field name, e.g. "reportedBy")
    kind: FieldErrorKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ValidationFailure:
    errors: tuple[FieldError, ...]

    def to_list(self) -> list[dict[str, str]]:
        return [error.to_dict() for error in self.errors]


@dataclass(frozen=True)
class ValidatedIssue:
    """생성용 정규화 레코드 — Normalized record ready for insertion."""

    title: str
    description: str
    location: str
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    reported_by: str = DEFAULT_REPORTER


@dataclass(frozen=True)
class ValidatedPartialIssue:
    """수정용 정규화 부분 레코드.

    Normalized partial record. `changes` maps model attribute names to
    storage values and always holds at least one entry.
    """

    changes: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> IssueStatus | None:
        value = self.changes.get("status")
        return IssueStatus(value) if value is not None else None


@dataclass(frozen=True)
class _TextRule:
    attr: str
    max_length: int
    required: bool


# 텍스트 필드 규칙 — Wire name -> (model attribute, max length, required on create)
_TEXT_RULES: dict[str, _TextRule] = {
    "title": _TextRule("title", TITLE_MAX_LENGTH, True),
    "description": _TextRule("description", DESCRIPTION_MAX_LENGTH, True),
    "location": _TextRule("location", LOCATION_MAX_LENGTH, True),
    "reportedBy": _TextRule("reported_by", REPORTED_BY_MAX_LENGTH, False),
}

_CHOICE_RULES: dict[str, type[Enum]] = {
    "status": IssueStatus,
    "priority": IssuePriority,
}

RECOGNIZED_FIELDS: frozenset[str] = frozenset(_TEXT_RULES) | frozenset(_CHOICE_RULES)


def _check_text(name: str, raw: Any, rule: _TextRule) -> tuple[str | None, FieldError | None]:
    if raw is None:
        if rule.required:
            return None, FieldError(name, FieldErrorKind.REQUIRED, f"{name} is required")
        return DEFAULT_REPORTER, None
    if not isinstance(raw, str):
        return None, FieldError(name, FieldErrorKind.INVALID_TYPE, f"{name} must be a string")

    value: str = raw.strip()
    if not value:
        if rule.required:
            return None, FieldError(name, FieldErrorKind.REQUIRED, f"{name} is required")
        return DEFAULT_REPORTER, None
    if len(value) > rule.max_length:
        return None, FieldError(
            name,
            FieldErrorKind.TOO_LONG,
            f"{name} cannot be more than {rule.max_length} characters",
        )
    return value, None


def _check_choice(name: str, raw: Any, choices: type[Enum]) -> tuple[Enum | None, FieldError | None]:
    allowed: list[str] = [member.value for member in choices]
    candidate = raw.strip() if isinstance(raw, str) else raw
    try:
        return choices(candidate), None
    except ValueError:
        return None, FieldError(
            name,
            FieldErrorKind.INVALID_CHOICE,
            f"{name} must be one of: {', '.join(allowed)}",
        )


def _not_an_object() -> ValidationFailure:
    return ValidationFailure(
        (FieldError("body", FieldErrorKind.INVALID_TYPE, "Request body must be a JSON object"),)
    )


def validate_create(payload: Any) -> ValidatedIssue | ValidationFailure:
    """생성 페이로드를 검증합니다.

    Validate a create payload. Missing status/priority/reportedBy take their
    defaults; unrecognized keys (including `completed`) are ignored.

    Args:
        payload: 요청 본문 (Decoded JSON request body)

    Returns:
        ValidatedIssue | ValidationFailure: 정규화 레코드 또는 필드 오류 목록
            (Normalized record, or every field error found)
    """
    if not isinstance(payload, dict):
        return _not_an_object()

    errors: list[FieldError] = []
    values: dict[str, Any] = {}

    for name, rule in _TEXT_RULES.items():
        value, error = _check_text(name, payload.get(name), rule)
        if error is not None:
            errors.append(error)
        else:
            values[rule.attr] = value

    for name, choices in _CHOICE_RULES.items():
        if payload.get(name) is None:
            continue
        choice, error = _check_choice(name, payload[name], choices)
        if error is not None:
            errors.append(error)
        else:
            values[name] = choice

    if errors:
        return ValidationFailure(tuple(errors))
    return ValidatedIssue(**values)


def validate_update(payload: Any) -> ValidatedPartialIssue | ValidationFailure:
    """수정 페이로드를 검증합니다.

    Validate a partial update payload. Only fields present in the payload
    are checked; at least one recognized field is required.

    Args:
        payload: 요청 본문 (Decoded JSON request body)

    Returns:
        ValidatedPartialIssue | ValidationFailure: 변경 사항 또는 필드 오류 목록
            (Normalized changes, or every field error found)
    """
    if not isinstance(payload, dict):
        return _not_an_object()

    present: list[str] = [name for name in payload if name in RECOGNIZED_FIELDS]
    if not present:
        return ValidationFailure(
            (FieldError("body", FieldErrorKind.EMPTY_UPDATE, "At least one updatable field is required"),)
        )

    errors: list[FieldError] = []
    changes: dict[str, Any] = {}

    for name in present:
        if name in _TEXT_RULES:
            rule = _TEXT_RULES[name]
            value, error = _check_text(name, payload[name], rule)
            if error is None:
                changes[rule.attr] = value
        else:
            choice, error = _check_choice(name, payload[name], _CHOICE_RULES[name])
            if error is None:
                changes[name] = choice.value
        if error is not None:
            errors.append(error)

    if errors:
        return ValidationFailure(tuple(errors))
    return ValidatedPartialIssue(changes)

"""Typed commands parsed from raw request input.

Every ``parse_*`` function is purely syntactic: it never consults the store
and raises :class:`~shortlinks.errors.InvalidInput` listing each field that
failed, built from the pydantic ``ValidationError``.
"""

from typing import Annotated, Any, Dict, List, Mapping, Tuple, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field, ValidationError, field_validator

from .common.validators import check_long_url, check_url_id
from .errors import InvalidInput, ResponseCode

UrlId = Annotated[UUID, BeforeValidator(check_url_id)]

C = TypeVar("C", bound="Command")

# Messages replacing pydantic's defaults, keyed by (field, error type)
ISSUE_MESSAGES = {
    ("urlIds", "missing"): "urlIds is required",
    ("urlIds", "uuid_parsing"): "Invalid URL ID",
    ("urlId", "missing"): "URL ID is required",
    ("urlId", "uuid_parsing"): "Invalid URL ID",
    ("shortCode", "missing"): "Short code is required",
    ("shortCode", "string_too_short"): "Short code is required",
    ("shortCode", "string_type"): "Short code must be a string",
    ("longUrl", "missing"): "URL is required",
    ("longUrl", "string_type"): "URL is required",
    ("body", "model_type"): "Expected a JSON object",
}


class Command(BaseModel):
    """Base for validated, immutable commands."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class ListUrlsCommand(Command):
    url_ids: Tuple[UrlId, ...] = Field(..., alias="urlIds")

    @field_validator("url_ids", mode="before")
    @classmethod
    def split_ids(cls, value: Any) -> Any:
        """Split the comma-separated string; empty means no ids."""
        if isinstance(value, str):
            return value.split(",") if value else []
        if isinstance(value, (list, tuple)):
            return value
        raise ValueError("urlIds must be a comma-separated string")

    @field_validator("url_ids")
    @classmethod
    def drop_duplicates(cls, value: Tuple[UUID, ...]) -> Tuple[UUID, ...]:
        return tuple(dict.fromkeys(value))


class GetByShortCodeCommand(Command):
    short_code: str = Field(..., alias="shortCode", min_length=1, strict=True)


class CreateUrlCommand(Command):
    long_url: str = Field(..., alias="longUrl")

    @field_validator("long_url", mode="before")
    @classmethod
    def validate_long_url(cls, value: Any) -> Any:
        return check_long_url(value)


class UrlIdCommand(Command):
    """A command addressing one record by id."""

    url_id: UrlId = Field(..., alias="urlId")


class EditUrlCommand(UrlIdCommand):
    long_url: str = Field(..., alias="longUrl")

    @field_validator("long_url", mode="before")
    @classmethod
    def validate_long_url(cls, value: Any) -> Any:
        return check_long_url(value)


class DeleteUrlCommand(UrlIdCommand):
    pass


def _issue_message(field: str, error: Dict[str, Any]) -> str:
    if (field, error["type"]) in ISSUE_MESSAGES:
        return ISSUE_MESSAGES[(field, error["type"])]
    if error["type"] == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return error["msg"]


def _issues(exc: ValidationError) -> List[Dict[str, Any]]:
    """Field-level issues from a ValidationError, in field order."""
    issues = []
    for error in exc.errors():
        loc = error["loc"]
        field = str(loc[0]) if loc else "body"
        issue = {"field": field, "message": _issue_message(field, error)}
        if len(loc) > 1:
            # Position inside a list field such as urlIds
            issue["index"] = loc[1]
            issue["value"] = error["input"]
        issues.append(issue)
    return issues


def _validate(model: Type[C], raw: Any, code: ResponseCode) -> C:
    try:
        return model.model_validate({} if raw is None else raw)
    except ValidationError as e:
        raise InvalidInput(_issues(e), code=code) from e


def parse_list_query(raw: Any) -> ListUrlsCommand:
    """Parse ``urlIds``, a comma-separated list of record ids.

    An empty string is a valid query for no ids. Duplicates are dropped,
    keeping first-seen order.
    """
    return _validate(ListUrlsCommand, raw, ResponseCode.INVALID_URL_ID)


def parse_short_code_query(raw: Any) -> GetByShortCodeCommand:
    """Parse the ``shortCode`` query field."""
    return _validate(GetByShortCodeCommand, raw, ResponseCode.INVALID_SHORT_CODE)


def parse_create_body(raw: Any) -> CreateUrlCommand:
    """Parse a create request body ``{"longUrl": ...}``."""
    return _validate(CreateUrlCommand, raw, ResponseCode.INVALID_URL_FORMAT)


def parse_edit_command(path_param: Any, body: Any) -> EditUrlCommand:
    """Parse the record id path parameter plus the ``longUrl`` body field.

    Both parts are checked so the error lists every failure.
    """
    if body is None:
        body = {}

    issues: List[Dict[str, Any]] = []
    if isinstance(body, Mapping):
        try:
            return EditUrlCommand.model_validate({**body, "urlId": path_param})
        except ValidationError as e:
            issues = _issues(e)
    else:
        try:
            UrlIdCommand.model_validate({"urlId": path_param})
        except ValidationError as e:
            issues = _issues(e)
        issues.append({"field": "body", "message": ISSUE_MESSAGES[("body", "model_type")]})

    id_failed = any(issue["field"] == "urlId" for issue in issues)
    code = ResponseCode.INVALID_URL_ID if id_failed else ResponseCode.INVALID_URL_FORMAT
    raise InvalidInput(issues, code=code)


def parse_delete_command(path_param: Any) -> DeleteUrlCommand:
    """Parse the record id path parameter of a delete request."""
    return _validate(DeleteUrlCommand, {"urlId": path_param}, ResponseCode.INVALID_URL_ID)

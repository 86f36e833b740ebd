from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.utils.exceptions import ValidationError

RULE_ERROR = "rule"

ModelT = TypeVar("ModelT", bound="PayloadModel")


class PayloadModel(BaseModel):
    """Request body validated into typed input.

    ``error_messages`` maps ``"<field>.<pydantic error type>"`` or a bare
    ``"<field>"`` (camelCase, as sent by clients) to the message reported for
    it. Validators raise ``PydanticCustomError(RULE_ERROR, ...)`` when their
    message must be reported verbatim.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    error_messages: ClassVar[dict[str, str]] = {}

    @classmethod
    def from_payload(cls: type[ModelT], payload: Any) -> ModelT:
        try:
            return cls.model_validate(payload if payload is not None else {})
        except PydanticValidationError as exc:
            messages = [cls._message_for(err) for err in exc.errors()]
            raise ValidationError(messages[0], errors=messages) from exc

    @classmethod
    def _message_for(cls, err: dict) -> str:
        field = str(err["loc"][0]) if err["loc"] else ""
        specific = cls.error_messages.get(f"{field}.{err['type']}")
        if specific:
            return specific
        if err["type"] == RULE_ERROR:
            return err["msg"]
        generic = cls.error_messages.get(field)
        if generic:
            return generic
        return f"{field}: {err['msg']}" if field else err["msg"]


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

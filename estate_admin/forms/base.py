# ================================
# CONDITIONAL FORM BASE (forms/base.py)
# ================================

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set, Tuple, Type

from pydantic import BaseModel, ValidationError

from estate_admin.core.exceptions import ApiError, FormValidationError
from estate_admin.forms.validators import is_blank
from estate_admin.schemas.document import FileUpload
from estate_admin.utils.error_messages import (
    DUPLICATE_FIELD_HINTS, FORM_ERROR, duplicate_field_hint, pydantic_field_errors
)

logger = logging.getLogger(__name__)

@dataclass
class FormResult:
    """Either a validated payload or field errors, never both"""
    payload: Optional[Dict[str, Any]] = None
    model: Optional[BaseModel] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.model is not None

class ConditionalForm:
    """Form whose required/visible fields depend on discriminant values.

    Subclasses declare:
      create_schema / update_schema: pydantic schemas for the final check
      discriminants: {field: {value: (fields active for that value)}}
      required_fields: always required
      create_only_fields: required on create, dropped from edits
    and may override check() for cross-field rules.
    """

    create_schema: Type[BaseModel] = BaseModel
    update_schema: Type[BaseModel] = BaseModel
    discriminants: Dict[str, Dict[Any, Tuple[str, ...]]] = {}
    required_fields: Tuple[str, ...] = ()
    create_only_fields: Tuple[str, ...] = ()
    defaults: Dict[str, Any] = {}
    labels: Dict[str, str] = {}

    def __init__(self, values: Optional[Dict[str, Any]] = None, entity_id: Optional[str] = None, target: Any = None):
        self.values: Dict[str, Any] = {**self.defaults, **(values or {})}
        self.entity_id = entity_id
        self.target = target  # lifecycle manager or service
        self.file: Optional[FileUpload] = None
        self.errors: Dict[str, str] = {}
        self.server_errors: Dict[str, str] = {}
        self.submitting = False

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None

    def label(self, name: str) -> str:
        return self.labels.get(name) or name.replace("_", " ").capitalize()

    def set(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.errors.pop(name, None)
        self.server_errors.pop(name, None)

    def attach(self, file: Optional[FileUpload]) -> None:
        self.file = file
        self.errors.pop("file", None)

    def reset(self) -> None:
        self.values = dict(self.defaults)
        self.file = None
        self.errors = {}
        self.server_errors = {}

    # Field groups

    def group_fields(self) -> Set[str]:
        fields: Set[str] = set()
        for groups in self.discriminants.values():
            for names in groups.values():
                fields.update(names)
        return fields

    def active_fields(self) -> Set[str]:
        active: Set[str] = set()
        for discriminant, groups in self.discriminants.items():
            active.update(groups.get(self.values.get(discriminant), ()))
        return active

    def inactive_fields(self) -> Set[str]:
        return self.group_fields() - self.active_fields()

    def required(self) -> Tuple[str, ...]:
        names = list(self.required_fields)
        if not self.is_edit:
            names.extend(self.create_only_fields)
        names.extend(sorted(self.active_fields()))
        return tuple(names)

    # Validation

    def shape(self) -> Dict[str, Any]:
        """Outgoing values: blanks to None, inactive groups cleared"""
        payload = {}
        for name, value in self.values.items():
            payload[name] = None if isinstance(value, str) and not value.strip() else value
        for name in self.inactive_fields():
            payload[name] = None
        if self.is_edit:
            for name in self.create_only_fields:
                payload.pop(name, None)
        return payload

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        """Cross-field rules; return {field: message}"""
        return {}

    def validate(self) -> FormResult:
        payload = self.shape()
        errors: Dict[str, str] = {}

        for name in self.required():
            if is_blank(payload.get(name)):
                errors[name] = f"{self.label(name)} is required"

        for name, message in self.check(payload).items():
            if message:
                errors.setdefault(name, message)

        if errors:
            self.errors = errors
            return FormResult(errors=errors)

        schema = self.update_schema if self.is_edit else self.create_schema
        try:
            model = schema.model_validate(payload)
        except ValidationError as e:
            self.errors = pydantic_field_errors(e)
            return FormResult(errors=self.errors)

        self.errors = {}
        if self.is_edit:
            dumped = model.model_dump(mode="json", exclude_unset=True)
        else:
            dumped = model.model_dump(mode="json")
        return FormResult(payload=dumped, model=model)

    # Submission

    def _server_rejected(self, error: ApiError) -> None:
        hint = duplicate_field_hint(error.detail)
        if hint:
            self.server_errors = {hint: DUPLICATE_FIELD_HINTS[hint]}
        else:
            self.server_errors = {FORM_ERROR: error.detail}

    async def _send(self, model: BaseModel):
        if self.is_edit:
            if self.file is not None:
                return await self.target.update(self.entity_id, model, self.file)
            return await self.target.update(self.entity_id, model)
        if self.file is not None:
            return await self.target.create(model, self.file)
        return await self.target.create(model)

    async def submit(self):
        """Validate locally, then send; on rejection the entered values stay as they are"""
        result = self.validate()
        if not result.is_valid:
            raise FormValidationError(result.errors)
        if self.target is None:
            raise RuntimeError(f"{type(self).__name__} has no submit target")

        self.server_errors = {}
        self.submitting = True
        try:
            entity = await self._send(result.model)
        except ApiError as e:
            self._server_rejected(e)
            logger.info(f"{type(self).__name__} rejected by server: {e.detail}")
            raise
        finally:
            self.submitting = False

        if not self.is_edit:
            self.reset()
        return entity

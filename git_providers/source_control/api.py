# git_providers/source_control/api.py

"""
Contracts between the provider-neutral core and the backends.

A backend supplies, per resource kind, one ``ResourceAPI`` (the five raw
server calls) and one ``ResourceMapper`` (conversion between the server's
shape and the provider-neutral desired-state model). Server objects are
``APIObject`` pydantic models.
"""

from typing import Any, ClassVar, NamedTuple, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..core.context import OperationContext
from ..core.exceptions import ValidationFailedError
from .pagination import ListOptions, Page


class APIObject(BaseModel):
    """A decoded server object.

    All fields are optional at decode time; ``required_fields`` lists the
    (possibly dotted) fields the validator insists on before the object is
    handed to anyone.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    required_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _decode_error(type(self), e) from e

    @classmethod
    def from_api(cls, data: dict[str, Any]):
        """Decode a wire body; malformed bodies raise ValidationFailedError."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise _decode_error(cls, e) from e

    def to_api(self) -> dict[str, Any]:
        """Wire representation, using server field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _decode_error(model: type, error: ValidationError) -> ValidationFailedError:
    first = error.errors()[0] if error.error_count() else {}
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return ValidationFailedError(
        f"Malformed {model.__name__} from server: {field or 'body'}: {first.get('msg', error)}",
        field=field,
        original_error=error,
    )


RefT = TypeVar("RefT")
ParentT = TypeVar("ParentT")
ObjT = TypeVar("ObjT", bound=APIObject)
InfoT = TypeVar("InfoT")


class ResourceAPI(Protocol[RefT, ParentT, ObjT]):
    """Raw server access for one resource kind on one backend.

    Operations a backend cannot perform raise UnsupportedOperationError.
    """

    async def fetch_one(self, ref: RefT, ctx: OperationContext) -> ObjT: ...

    async def fetch_page(
        self, parent: ParentT, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[ObjT], Page]: ...

    async def create_one(self, ref: RefT, obj: ObjT, ctx: OperationContext) -> ObjT: ...

    async def update_one(self, ref: RefT, obj: ObjT, ctx: OperationContext) -> ObjT: ...

    async def delete_one(self, ref: RefT, ctx: OperationContext) -> None: ...


class ResourceMapper(Protocol[RefT, ParentT, ObjT, InfoT]):
    """Pure conversions between a server object and its desired state.

    For every field F that ``desired`` sets,
    ``to_desired(apply_desired(desired, obj)).F == desired.F``.
    """

    def to_desired(self, obj: ObjT) -> InfoT: ...

    def apply_desired(self, desired: InfoT, obj: ObjT) -> ObjT: ...

    def new_object(self, ref: RefT, desired: InfoT) -> ObjT: ...

    def ref_of(self, obj: ObjT, parent: ParentT) -> RefT: ...

    def validate_desired(self, desired: InfoT) -> None: ...


class Binding(NamedTuple):
    """The API and mapper a backend chose for one resource kind."""

    api: Any
    mapper: Any

from dataclasses import dataclass
from typing import Any, Callable

from ...utilities.undefined import Undefined, UNDEFINED
from ...utilities.setup_error import SetupError


@dataclass
class _SchemaConfig:
    """ Do not instantiate this directly. Use SchemaConfig() instead. """
    default_value: Any | Undefined
    default_factory: Callable[[], Any] | None
    kw_only: bool
    validation_func: Callable[[Any], None] | None
    """ Runs after the type check. Should raise a ValidationError with a client-shareable message. """

    def has_default(self) -> bool:
        if self.default_value is not UNDEFINED or self.default_factory is not None:
            return True
        return False

    def get_default(self) -> Any:
        if self.default_value is not UNDEFINED:
            return self.default_value
        elif self.default_factory is not None:
            return self.default_factory()
        else:
            raise ValueError(f"No default value set.")

def SchemaConfig(
        # Note that for a field specifier, the following parameters are recognized by dataclass_transform as having special properties:
        #   - default
        #   - default_factory
        #   - kw_only
        *,
        default: Any | Undefined = UNDEFINED,
        default_factory: Callable[[], Any] | None = None,
        kw_only: bool = False,
        validation_func: Callable[[Any], None] | None = None
    ) -> Any:
    """ Use this to add configurations to Document fields.

    The generated _SchemaConfig will be consumed by BsonableDataclassMeta, stashed into FieldSchema.schema_config, and then stored into the class field as well as registered into cls.__bsonable_fields__

    Declare the return type as 'Any' so that the static type-checker doesn't complain. (Type checkers expect class fields to be the same type as instance fields.) """

    if default is not UNDEFINED and default_factory is not None:
        raise SetupError("Cannot specify both default and default_factory")

    # Instances share default values, so they must not be mutable containers
    if isinstance(default, (list, dict, set)):
        raise SetupError(f"Mutable default {default!r} is not allowed. Use default_factory instead.")

    return _SchemaConfig(
        default_value=default,
        default_factory=default_factory,
        kw_only=kw_only,
        validation_func=validation_func
    )

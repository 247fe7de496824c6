from types import UnionType
from typing import Annotated, Union, get_args, get_origin

from .type_info import TypeInfo
from .bson_types import SEQUENCES
from ...utilities.setup_error import SetupError


def get_type_info(type_: type) -> TypeInfo:
    """ Extracts type and subtype (if present) for a **single** (non-Union) type. """
    origin = get_origin(type_)

    if origin is Annotated:
        # Annotated[list[int], ...] -> list[int]
        base_type = get_args(type_)[0]
        return get_type_info(base_type)
    elif origin in {Union, UnionType}:
        raise SetupError("get_type_info() should only be used for single types.")
    elif origin is dict:
        # For now, we don't store any sub type information for a dict
        return TypeInfo(
            type_=dict,
            sub_type=None
        )
    elif origin is None:
        if not isinstance(type_, type):
            raise SetupError(f"Unable to get type info for annotation {type_!r}.")
        return TypeInfo(
            type_=type_,
            sub_type=None
        )
    elif origin in (set, frozenset):
        raise SetupError(f"Set annotations are not supported, since stored arrays are ordered and may repeat elements. Use list[T] or tuple[T, ...] instead of {type_!r}.")
    elif origin in SEQUENCES:
        args = get_args(type_)
        # tuple[int, ...] is the only tuple form we can store, since BSON arrays are homogeneous here
        if origin is tuple:
            if len(args) != 2 or args[1] is not Ellipsis:
                raise SetupError(f"Tuple fields must be annotated as tuple[T, ...]. Got {type_!r}.")
            args = args[:1]
        if len(args) != 1:
            raise SetupError(f"Sequence annotation {type_!r} must specify exactly one element type.")
        return TypeInfo(
            type_=origin,
            sub_type=args[0]
        )
    else:
        raise SetupError(f"Unsupported generic annotation {type_!r}.")


def get_type_info_list(type_annotation: type | UnionType) -> list[TypeInfo]:
    """ Take in a type_annotation (or type) and returns a list of the TypeInfos contained within it.
    
    For Unioned types, returns multiple TypeInfos. For non-Unioned types, returns a single TypeInfo.
    """
    origin = get_origin(type_annotation)
    
    if origin is Annotated:
        base_type = get_args(type_annotation)[0]
        return get_type_info_list(base_type)

    # For union types, return TypeInfo for each unioned type
    elif origin in {Union, UnionType}:
        return [get_type_info(unioned_type) for unioned_type in get_args(type_annotation)]
    
    else:
        return [get_type_info(type_annotation)] # type: ignore

#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from collections.abc import Hashable
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Annotated, Any, Iterator, Union, get_args, get_origin

if TYPE_CHECKING:
    from concordium_derive.codecs.codec import Codec

# attribute set on classes by the derive decorators, holds the generated codec
CODEC_ATTR: str = '__concordium_codec__'


def strip_annotated(type_: Any) -> Any:
    """ Remove the `Annotated[...]` wrapper of a type, if any.

    >>> strip_annotated(Annotated[list[int], 'metadata'])
    list[int]
    >>> strip_annotated(int)
    <class 'int'>
    """
    while get_origin(type_) is Annotated:
        type_ = get_args(type_)[0]
    return type_


def get_derived_codec(type_: Any) -> 'Codec | None':
    """ Return the codec generated for a class by one of the derive decorators, `None` if it has none.

    Only the class's own attribute counts, a subclass of a derived class is not derived itself.
    """
    if not isinstance(type_, type):
        return None
    return type_.__dict__.get(CODEC_ATTR)


def get_origin_classes(type_: Any) -> Iterator[type]:
    """ This util function is useful to generalize over a type T and unions A | B.

    >>> list(get_origin_classes(int))
    [<class 'int'>]
    >>> list(get_origin_classes(int | str))
    [<class 'int'>, <class 'str'>]
    >>> list(get_origin_classes(set[int] | dict[int, str]))
    [<class 'set'>, <class 'dict'>]
    """
    origin_type = get_origin(type_) or type_
    if origin_type in (UnionType, Union):
        for arg_type in get_args(type_):
            yield get_origin(arg_type) or arg_type
    else:
        yield origin_type


def is_origin_hashable(type_: Any) -> bool:
    """ Checks whether the given type signature satisfies `collections.abc.Hashable`.

    This check ignores type arguments, but takes into account all types of an union. NewTypes are checked through their
    supertype.

    >>> is_origin_hashable(int)
    True
    >>> is_origin_hashable(str | None)
    True
    >>> is_origin_hashable(set[int])
    False
    >>> is_origin_hashable(frozenset[int])
    True
    >>> is_origin_hashable(list)
    False
    """
    return all(_is_origin_hashable(origin_class) for origin_class in get_origin_classes(type_))


def _is_origin_hashable(origin_class: Any) -> bool:
    while hasattr(origin_class, '__supertype__'):
        origin_class = origin_class.__supertype__
    if origin_class is NoneType:
        return True
    return isinstance(origin_class, type) and issubclass(origin_class, Hashable)


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(None)
    'None'
    >>> pretty_type(dict[str, int])
    'dict[str, int]'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__'):
        return str(type_)
    else:
        return getattr(type_, '__name__', repr(type_))


def get_usable_origin_type(type_: Any, /, *, type_map: 'Codec.TypeMap') -> Any:
    """ Map a type into the key under which its codec class is found in `type_map.codecs_map`.

    If the given type cannot be used with the given type_map, a TypeError exception will be raised.

    >>> from concordium_derive.codecs import DEFAULT_TYPE_MAP
    >>> get_usable_origin_type(dict[str, bool], type_map=DEFAULT_TYPE_MAP)
    <class 'dict'>
    >>> get_usable_origin_type(bool | None, type_map=DEFAULT_TYPE_MAP)
    <class 'types.UnionType'>
    >>> get_usable_origin_type(int, type_map=DEFAULT_TYPE_MAP)
    Traceback (most recent call last):
    ...
    TypeError: type int is not supported, use a sized integer such as U32 or I64
    """
    if isinstance(type_, str):
        raise TypeError(f'unresolved forward reference: {type_!r}')

    origin_type = get_origin(type_) or type_

    # XXX: typing.Optional[T] and T | None are the same thing for our purposes
    if origin_type is Union:
        origin_type = UnionType

    if origin_type in type_map.codecs_map:
        return origin_type

    if origin_type is int:
        raise TypeError('type int is not supported, use a sized integer such as U32 or I64')

    raise TypeError(f'type {pretty_type(type_)} is not supported by any codec')

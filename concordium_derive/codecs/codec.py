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

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Generic, NamedTuple, TypeVar, final

from typing_extensions import Self

from concordium_derive.codecs.utils import get_derived_codec, get_usable_origin_type, strip_annotated
from concordium_derive.serialization import Deserializer, Serializer

T = TypeVar('T')


class Codec(ABC, Generic[T]):
    """ This class is used to model a type with a known type signature and how it will be (de)serialized.

    Codecs compose: a codec for `list[Foo]` holds the codec for `Foo`, which may itself be the codec generated for a
    derived class. The generated codecs for structs and enums are also subclasses of this class.
    """

    class TypeMap(NamedTuple):
        codecs_map: Mapping[Any, type[Codec]]

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    # XXX: subclasses must initialize this property
    _is_hashable: bool

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: TypeMap) -> Codec:
        """ Instantiate a Codec instance from a type signature using the given map.

        Classes carrying a generated codec use it, everything else is looked up by its origin type in the map.
        """
        type_ = strip_annotated(type_)
        derived_codec = get_derived_codec(type_)
        if derived_codec is not None:
            return derived_codec
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        codec_class = type_map.codecs_map[usable_origin]
        return codec_class._from_type(type_, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: TypeMap) -> Self:
        """ Instantiate a Codec instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        decide on using `Codec.from_type`, forwarding the given `type_map` to continue instantiating codecs for inner
        types.
        """
        # XXX: a Codec that is only meant for local use does not need to implement _from_type
        raise TypeError(f'{cls} is not compatible with use in a Codec.TypeMap')

    @final
    def is_hashable(self) -> bool:
        """ Indicates whether the type being abstracted over is expected to be hashable, map keys and set members must
        be."""
        return self._is_hashable

    def _inner_codecs(self) -> Iterable[Codec]:
        """ Codecs this one delegates to."""
        return ()

    def can_serialize(self) -> bool:
        return all(codec.can_serialize() for codec in self._inner_codecs())

    def can_deserialize(self) -> bool:
        return all(codec.can_deserialize() for codec in self._inner_codecs())

    @final
    def check_value(self, value: T, /) -> None:
        """ Raise a TypeError or ValueError if the value is not compatible, recursing into compound values."""
        # XXX: subclasses must implement Codec._check_value, not Codec.check_value
        self._check_value(value, deep=True)

    @final
    def serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Serialize a value instance according to the signature that was abstracted.

        Serialization includes calling check_value while the value is being serialized, so calling check_value before
        calling serialize is not needed.
        """
        # XXX: subclasses must implement Codec._serialize, not Codec.serialize
        self._check_value(value, deep=False)
        self._serialize(serializer, value)

    @final
    def deserialize(self, deserializer: Deserializer, /) -> T:
        """ Deserialize a value instance according to the signature that was abstracted.

        Any problem with the input data raises a SerializationError.
        """
        # XXX: subclasses must implement Codec._deserialize, not Codec.deserialize
        return self._deserialize(deserializer)

    @final
    def to_bytes(self, value: T, /) -> bytes:
        """ Shortcut to quickly convert a value T to `bytes` and avoid using the serialization system.
        """
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer, value)
        return bytes(serializer.finalize())

    @final
    def from_bytes(self, data: bytes, /) -> T:
        """ Shortcut to quickly parse a value T from `bytes`, every byte must be consumed.
        """
        deserializer = Deserializer.build_bytes_deserializer(data)
        value = self.deserialize(deserializer)
        deserializer.finalize()
        return value

    @abstractmethod
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        """ Inner implementation of `Codec.check_value`.

        Compound values should use `Codec._check_value` on the inner type(s) and pass the appropriate deep argument.
        """
        raise NotImplementedError

    @abstractmethod
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Inner implementation of `serialize`, you can assume that the give value has been "shallow checked".

        Compound codecs should pass `Codec.serialize` of the inner codecs as an `Encoder`, not `Codec._serialize`.
        """
        raise NotImplementedError

    @abstractmethod
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        """ Inner implementation of `deserialize`."""
        raise NotImplementedError

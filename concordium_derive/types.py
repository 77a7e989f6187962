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

from typing import NamedTuple, NewType

# Sized integers, a plain `int` annotation is ambiguous on the wire so every integer field must use one of these.
U8 = NewType('U8', int)
U16 = NewType('U16', int)
U32 = NewType('U32', int)
U64 = NewType('U64', int)
U128 = NewType('U128', int)
I8 = NewType('I8', int)
I16 = NewType('I16', int)
I32 = NewType('I32', int)
I64 = NewType('I64', int)
I128 = NewType('I128', int)

# Amount of microCCD, encoded as a u64.
Amount = NewType('Amount', int)
# Milliseconds since the unix epoch, encoded as a u64.
Timestamp = NewType('Timestamp', int)
# Milliseconds, encoded as a u64.
Duration = NewType('Duration', int)

ACCOUNT_ADDRESS_SIZE: int = 32
AccountAddress = NewType('AccountAddress', bytes)


class ContractAddress(NamedTuple):
    index: U64
    subindex: U64


class SumType:
    """Base class for enums whose variants carry data.

    Every dataclass or NamedTuple nested directly in the class body is a variant, in declaration order:

        @serialize
        class Shape(SumType):
            @dataclass
            class Circle:
                radius: U32

            class Rectangle(NamedTuple):
                width: U32
                height: U32

            @dataclass
            class Empty:
                pass

    Values are instances of the variant classes (`Shape.Circle(radius=U32(1))`), the enclosing class is only used as a
    type annotation.
    """

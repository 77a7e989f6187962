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

from enum import Enum, unique
from typing import TYPE_CHECKING, Any, Optional

from concordium_derive.codecs import make_codec_for_type
from concordium_derive.utils.result import Err, Ok, Result

if TYPE_CHECKING:
    from concordium_derive.runtime.host import Host

# limits enforced by the host on the events of a single call
MAX_LOG_SIZE: int = 512
MAX_NUM_LOGS: int = 64


@unique
class LogError(Enum):
    # the call already logged MAX_NUM_LOGS events
    FULL = 'full'
    # the event is larger than MAX_LOG_SIZE bytes
    MALFORMED = 'malformed'


class Logger:
    """Appends events to the log of the current call."""

    def __init__(self, events: list[bytes]) -> None:
        self._events = events

    @classmethod
    def init(cls, host: Host) -> Logger:
        return cls(host.events)

    def log_bytes(self, event: bytes) -> Result[None, LogError]:
        if len(event) > MAX_LOG_SIZE:
            return Err(LogError.MALFORMED)
        if len(self._events) >= MAX_NUM_LOGS:
            return Err(LogError.FULL)
        self._events.append(bytes(event))
        return Ok(None)

    def log(self, event: Any, type_: Optional[Any] = None) -> Result[None, LogError]:
        """Encode an event with the codec of its class, or of `type_` when given, and log it."""
        codec = make_codec_for_type(type(event) if type_ is None else type_)
        return self.log_bytes(codec.to_bytes(event))

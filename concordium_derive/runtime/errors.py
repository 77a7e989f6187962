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

"""
This module defines how a call into a contract is aborted.

A call ends in one of three ways: it succeeds (status 0, or an action handle for receive functions), it is rejected
(status -1), or it traps. A trap aborts the call, no status is returned and the host must not observe any state
written by it.

`ContractTrap` inherits from `BaseException`, NOT from `Exception`, so an `except Exception` block in user code cannot
swallow it. Any other exception escaping user code is turned into a `ContractTrap` by `user_code_boundary`.
"""

import functools
from typing import Callable, NoReturn, ParamSpec, TypeVar, final

T = TypeVar('T')
P = ParamSpec('P')


@final
class ContractTrap(BaseException):
    """
    Raised when a call must be aborted, for example when the contract state cannot be read or written back.

    The original exception, if any, is available as `__cause__`.
    """


def trap(reason: str = '') -> NoReturn:
    """Abort the current call."""
    raise ContractTrap(reason)


def user_code_boundary(f: Callable[P, T]) -> Callable[P, T]:
    """
    Mark a call into user code from a generated entry point, an exception escaping it traps the call.
    """
    @functools.wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return f(*args, **kwargs)
        except Exception as e:
            # Unhandled exceptions in user code are bugs in the contract, the call cannot produce a status.
            raise ContractTrap(f'unhandled {type(e).__name__} in {f.__qualname__}') from e

    return wrapper

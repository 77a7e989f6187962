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
Entry point decorators: `@init`, `@receive` and `@concordium_test`.

A decorated function is returned unchanged, the generated export is recorded on it (see `exports`). The export has a
fixed signature, `(host, amount) -> status`, and runs these steps:

1. open the call context;
2. unless `payable`, reject a call carrying a non-zero amount with status -1, the user function is not called;
3. with `enable_logger`, set up a `Logger`;
4. with `low_level`, pass the raw `ContractState`, otherwise decode the contract state (receive functions) before the
   call and encode it back after a successful call. The state type is the annotation of the last argument of a receive
   function, an immutable state is declared as `StateRef[State]` and replaced through `state.value`. An init function
   declares its state as the return annotation `Ok[State] | Err[...]`;
5. call the user function with `(ctx[, amount][, logger][, state])`;
6. map the result: `Err` is -1, `Ok` is 0 for init functions and the handle of the returned action for receive
   functions.

A state that cannot be fully read or written back, an exception escaping the user function, or a user function that
does not return `Ok`/`Err` traps the call (`ContractTrap`).
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, unique
from types import NoneType, UnionType
from typing import Any, Optional, TypeVar, Union, get_args, get_origin, get_type_hints

from structlog import get_logger

from concordium_derive.codecs import Codec, make_codec_for_type
from concordium_derive.codecs.utils import pretty_type
from concordium_derive.conf import get_global_settings
from concordium_derive.derive.attributes import (
    Meta,
    Site,
    collect_metas,
    contains,
    find_string_value,
    find_value,
    validate_site,
)
from concordium_derive.derive.diagnostics import DeriveError, ErrorCollector, Span, report_errors
from concordium_derive.derive.exports import Export, ExportKind, attach_export
from concordium_derive.runtime.actions import Action
from concordium_derive.runtime.context import InitContext, ReceiveContext
from concordium_derive.runtime.errors import ContractTrap, user_code_boundary
from concordium_derive.runtime.host import Host
from concordium_derive.runtime.logger import Logger
from concordium_derive.runtime.state import ContractState, StateRef
from concordium_derive.schema import schema_of, schema_to_bytes
from concordium_derive.serialization import Serializer
from concordium_derive.types import Amount, SumType
from concordium_derive.utils.result import Err, Ok

logger = get_logger()

F = TypeVar('F', bound=Callable[..., Any])

# status of a rejected call
REJECTED: int = -1


@unique
class EntryPointKind(Enum):
    INIT = 'init'
    RECEIVE = 'receive'

    @property
    def site(self) -> Site:
        return Site.INIT if self is EntryPointKind.INIT else Site.RECEIVE


@dataclass(frozen=True, slots=True)
class EntryPointSpec:
    """Validated options of an entry point decorator."""

    kind: EntryPointKind
    contract: str
    receive_name: Optional[str]
    payable: bool
    enable_logger: bool
    low_level: bool
    # a class, or the name of a class defined in the module of the entry point
    parameter: Optional[type | str]

    @property
    def export_name(self) -> str:
        if self.kind is EntryPointKind.INIT:
            return f'init_{self.contract}'
        return f'{self.contract}.{self.receive_name}'

    @property
    def required_args(self) -> list[str]:
        """ The arguments the user function must declare, in order.

        >>> spec = EntryPointSpec(EntryPointKind.INIT, 'counter', None, True, False, False, None)
        >>> spec.required_args
        ['ctx: InitContext', 'amount: Amount']
        """
        if self.kind is EntryPointKind.INIT:
            args = ['ctx: InitContext']
        else:
            args = ['ctx: ReceiveContext']
        if self.payable:
            args.append('amount: Amount')
        if self.enable_logger:
            args.append('logger: Logger')
        if self.low_level:
            args.append('state: ContractState')
        elif self.kind is EntryPointKind.RECEIVE:
            args.append('state: State')
        return args


def build_spec(kind: EntryPointKind, metas: list[Meta], *, span: Span) -> EntryPointSpec:
    """ Validate the items of an entry point decorator, every problem is reported in a single error."""
    validate_site(metas, kind.site)
    errors = ErrorCollector()

    contract: Optional[str] = None
    with errors.collect():
        contract = find_string_value(metas, 'contract')
        if contract is None:
            if kind is EntryPointKind.INIT:
                message = ('A name for the contract must be provided, using the contract attribute. '
                           'For example, @init(contract="my-contract")')
            else:
                message = ("The name of the associated contract must be provided, using the 'contract' attribute.\n\n"
                           'For example, @receive(contract="my-contract")')
            raise DeriveError(message, span)

    receive_name: Optional[str] = None
    if kind is EntryPointKind.RECEIVE:
        with errors.collect():
            receive_name = find_string_value(metas, 'name')
            if receive_name is None:
                raise DeriveError(
                    "A name for the receive function must be provided, using the 'name' attribute.\n\n"
                    'For example, @receive(name="func-name", ...)',
                    span,
                )

    parameter: Optional[type | str] = None
    with errors.collect():
        parameter = find_value(metas, 'parameter')
        if parameter is not None and not isinstance(parameter, (str, type)):
            raise DeriveError('The `parameter` attribute must be a class or the name of a class.',
                              span.at_attribute('parameter'))

    flags: dict[str, bool] = {}
    for flag in ('payable', 'enable_logger', 'low_level'):
        with errors.collect():
            flags[flag] = contains(metas, flag)

    errors.raise_if_any()
    assert contract is not None
    return EntryPointSpec(
        kind=kind,
        contract=contract,
        receive_name=receive_name,
        payable=flags['payable'],
        enable_logger=flags['enable_logger'],
        low_level=flags['low_level'],
        parameter=parameter,
    )


def _check_arg_count(fn: Callable[..., Any], spec: EntryPointSpec, span: Span) -> list[str]:
    parameters = list(inspect.signature(fn).parameters)
    required_args = spec.required_args
    if len(parameters) != len(required_args):
        raise DeriveError(
            f'Incorrect number of function arguments, the expected arguments are ({", ".join(required_args)})',
            span,
        )
    return parameters


@dataclass(frozen=True, slots=True)
class StatePlan:
    """How the typed state of an entry point is encoded, and whether a receive function gets it through a `StateRef`."""

    codec: Codec
    by_ref: bool = False


def _type_hints(fn: Callable[..., Any], span: Span) -> dict[str, Any]:
    try:
        return get_type_hints(fn)
    except Exception as e:
        raise DeriveError(f'cannot resolve the state type: {e}', span) from e


def _state_codec(state_type: Any, span: Span) -> Codec:
    with report_errors(span):
        codec = make_codec_for_type(state_type)
    if not (codec.can_serialize() and codec.can_deserialize()):
        raise DeriveError(f'the contract state {pretty_type(state_type)} must derive @serialize', span)
    return codec


def _ok_type(annotation: Any) -> Any:
    """ The `T` of an `Ok[T]` annotation, alone or in a union such as `Ok[T] | Err[E]` or `Result[T, E]`.

    >>> _ok_type(Ok[int] | Err[str])
    <class 'int'>
    >>> _ok_type(Err[str]) is None
    True
    """
    if get_origin(annotation) in (Union, UnionType):
        candidates = get_args(annotation)
    else:
        candidates = (annotation,)
    for candidate in candidates:
        if get_origin(candidate) is Ok:
            ok_type, = get_args(candidate)
            return ok_type
    return None


def is_immutable_state(state_type: Any) -> bool:
    """ Whether a receive function cannot change a state of this type in place.

    >>> is_immutable_state(Amount), is_immutable_state(tuple[Amount, str]), is_immutable_state(Optional[list[Amount]])
    (True, True, True)
    >>> is_immutable_state(list[Amount]), is_immutable_state(dict[str, Amount])
    (False, False)
    """
    while hasattr(state_type, '__supertype__'):
        state_type = state_type.__supertype__
    origin = get_origin(state_type) or state_type
    if origin in (Union, UnionType):
        return True
    if not isinstance(origin, type):
        return False
    if issubclass(origin, (int, str, bytes, tuple, frozenset, Enum, SumType)):
        return True
    params = getattr(origin, '__dataclass_params__', None)
    return params is not None and params.frozen


def _init_state_plan(fn: Callable[..., Any], span: Span) -> StatePlan:
    """ The contract state of an init function is the `T` of its `Ok[T] | Err[E]` return annotation."""
    state_type = _ok_type(_type_hints(fn, span).get('return'))
    if state_type is None or state_type is NoneType:
        raise DeriveError('the return type of an init function must be annotated as `Ok[State] | Err[...]`', span)
    return StatePlan(_state_codec(state_type, span))


def _receive_state_plan(fn: Callable[..., Any], state_arg: str, span: Span) -> StatePlan:
    """ The contract state of a receive function is the annotation of its last argument."""
    state_type = _type_hints(fn, span).get(state_arg)
    if state_type is None:
        raise DeriveError(f'the `{state_arg}` argument must be annotated with the type of the contract state', span)
    if get_origin(state_type) is StateRef:
        state_type, = get_args(state_type)
        return StatePlan(_state_codec(state_type, span), by_ref=True)
    if is_immutable_state(state_type):
        name = pretty_type(state_type)
        raise DeriveError(
            f'the contract state {name} cannot be changed in place, annotate the `{state_arg}` argument as '
            f'StateRef[{name}]',
            span,
        )
    return StatePlan(_state_codec(state_type, span))


def _write_state(state_store: ContractState, data: bytes) -> None:
    state_store.seek(0)
    state_store.write_bytes(data)
    state_store.truncate()


def _encode_state(codec: Codec, state: Any) -> bytes:
    serializer = Serializer.build_bytes_serializer()
    try:
        codec.serialize(serializer, state)
    except (TypeError, ValueError) as e:
        raise ContractTrap('could not serialize the contract state') from e
    return bytes(serializer.finalize())


def _decode_state(codec: Codec, state_store: ContractState) -> Any:
    try:
        state = codec.deserialize(state_store)
        state_store.finalize()
    except (TypeError, ValueError) as e:
        # format errors, and field values rejected by the state class
        raise ContractTrap('could not fully read the contract state') from e
    return state


def _check_result(result: Any, fn: Callable[..., Any]) -> Ok | Err:
    if not isinstance(result, (Ok, Err)):
        raise ContractTrap(f'{fn.__qualname__} must return Ok or Err, got {type(result).__qualname__}')
    return result


def _check_action(action: Any, fn: Callable[..., Any]) -> Action:
    if not isinstance(action, Action):
        raise ContractTrap(f'{fn.__qualname__} must return an Action, got {type(action).__qualname__}')
    return action


def _make_export(
    fn: Callable[..., Any],
    spec: EntryPointSpec,
    state_plan: Optional[StatePlan],
) -> Callable[[Host, Amount], int]:
    call_user = user_code_boundary(fn)
    is_init = spec.kind is EntryPointKind.INIT
    log = logger.new(export=spec.export_name)

    def export(host: Host, amount: Amount) -> int:
        ctx = InitContext.open(host) if is_init else ReceiveContext.open(host)
        args: list[Any] = [ctx]

        if spec.payable:
            args.append(amount)
        elif amount != 0:
            log.info('non-payable entry point called with an amount', amount=amount)
            return REJECTED

        if spec.enable_logger:
            args.append(Logger.init(host))

        if spec.low_level:
            args.append(ContractState.open(host))
            result = _check_result(call_user(*args), fn)
            if isinstance(result, Err):
                return REJECTED
            return 0 if is_init else host.register_action(_check_action(result.unwrap(), fn))

        assert state_plan is not None
        if is_init:
            result = _check_result(call_user(*args), fn)
            if isinstance(result, Err):
                return REJECTED
            # encoded before touching the state store, a trap leaves it as it was
            host.state[:] = _encode_state(state_plan.codec, result.unwrap())
            return 0

        state_store = ContractState.open(host)
        state = _decode_state(state_plan.codec, state_store)
        state_ref = StateRef(state)
        args.append(state_ref if state_plan.by_ref else state)

        result = _check_result(call_user(*args), fn)
        if isinstance(result, Err):
            return REJECTED
        action = _check_action(result.unwrap(), fn)
        if state_plan.by_ref:
            state = state_ref.value
        _write_state(state_store, _encode_state(state_plan.codec, state))
        return host.register_action(action)

    export.__name__ = export.__qualname__ = spec.export_name
    return export


def _make_parameter_schema_export(fn: Callable[..., Any], spec: EntryPointSpec) -> Export:
    parameter = spec.parameter
    assert parameter is not None

    def parameter_schema() -> bytes:
        # names are resolved when called, the class may be defined after the entry point
        if isinstance(parameter, str):
            try:
                parameter_type = fn.__globals__[parameter]
            except KeyError:
                raise NameError(f'parameter type {parameter!r} is not defined in {fn.__module__}') from None
        else:
            parameter_type = parameter
        return schema_to_bytes(schema_of(parameter_type))

    name = f'concordium_schema_function_{spec.export_name}'
    return Export(name, ExportKind.SCHEMA, parameter_schema, fn.__qualname__)


def _generate(kind: EntryPointKind, fn: Any, items: tuple[Any, ...], options: dict[str, Any]) -> Any:
    span = Span(getattr(fn, '__qualname__', repr(fn)))
    if not inspect.isfunction(fn):
        raise DeriveError(f'@{kind.value} can only be applied to functions.', span)
    for item in items:
        if not isinstance(item, str):
            raise DeriveError(f'@{kind.value} items must be strings, got {item!r}', span)

    spec = build_spec(kind, collect_metas(items, options, span=span), span=span)
    parameters = _check_arg_count(fn, spec, span)

    state_plan: Optional[StatePlan] = None
    if not spec.low_level and kind is EntryPointKind.INIT:
        state_plan = _init_state_plan(fn, span)
    elif not spec.low_level:
        state_plan = _receive_state_plan(fn, parameters[-1], span)

    export_kind = ExportKind.INIT if kind is EntryPointKind.INIT else ExportKind.RECEIVE
    attach_export(fn, Export(spec.export_name, export_kind, _make_export(fn, spec, state_plan), fn.__qualname__))
    if spec.parameter is not None and get_global_settings().BUILD_SCHEMA:
        attach_export(fn, _make_parameter_schema_export(fn, spec))

    logger.debug('entry point generated', export=spec.export_name, required_args=spec.required_args)
    return fn


def _entry_point_decorator(kind: EntryPointKind, items: tuple[Any, ...], options: dict[str, Any]) -> Any:
    if len(items) == 1 and not options and inspect.isfunction(items[0]):
        # used without arguments, as `@init`, the contract name is missing
        return _generate(kind, items[0], (), {})

    def decorator(fn: F) -> F:
        return _generate(kind, fn, items, options)
    return decorator


def init(*items: Any, **options: Any) -> Any:
    """ Generate the `init_<contract>` export of a contract.

        @init(contract='counter', payable=True)
        def counter_init(ctx: InitContext, amount: Amount) -> Result[State, str]:
            ...

    The options can also be given as text, `@init('contract = "counter", payable')`.
    """
    return _entry_point_decorator(EntryPointKind.INIT, items, options)


def receive(*items: Any, **options: Any) -> Any:
    """ Generate the `<contract>.<name>` export of a contract.

    Unless `low_level` is set, the last argument must be annotated with the type of the contract state. A state that
    cannot be changed in place is replaced through a `StateRef`:

        @receive(contract='auction', name='close')
        def auction_close(ctx: ReceiveContext, state: StateRef[Phase]) -> Result[Action, str]:
            state.value = Phase.Closed()
            return Ok(accept())
    """
    return _entry_point_decorator(EntryPointKind.RECEIVE, items, options)


def concordium_test(fn: F) -> F:
    """ Export a test function as `concordium test <name>` when `WASM_TEST` is enabled in the settings."""
    if not inspect.isfunction(fn):
        span = Span(getattr(fn, '__qualname__', repr(fn)))
        raise DeriveError('@concordium_test can only be applied to functions.', span)
    if get_global_settings().WASM_TEST:
        attach_export(fn, Export(f'concordium test {fn.__name__}', ExportKind.TEST, fn, fn.__qualname__))
    return fn

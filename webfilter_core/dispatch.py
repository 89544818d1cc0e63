"""
webfilter_core.dispatch
-----------------------
Name-based invocation surface for hosts that call contract functions with a
function name and a list of string arguments, and expect bytes back.
"""

from __future__ import annotations
import json, re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence, Tuple
from .context import TransactionContext
from .contract import RecordContract
from .errors import InvalidArgumentError, UnknownFunctionError
from .logger import get_logger
from .record import FilterRecord

log = get_logger("WebFilter.Dispatch")


@dataclass(frozen=True)
class FunctionSpec:
    method: str
    params: Tuple[str, ...] = ()
    int_params: Tuple[str, ...] = ()


# plain ASCII decimal with optional sign, within int64; no spaces or "_"
INT_TEXT = re.compile(r"[+-]?[0-9]{1,19}")
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

RECORD_PARAMS = ("key", "blocklist", "attribute2", "attribute1", "webfilterlist")

FUNCTIONS: Dict[str, FunctionSpec] = {
    "Initialize": FunctionSpec("initialize"),
    "Create": FunctionSpec("create", RECORD_PARAMS, ("attribute2", "webfilterlist")),
    "Read": FunctionSpec("read", ("key",)),
    "Update": FunctionSpec("update", RECORD_PARAMS, ("attribute2", "webfilterlist")),
    "Delete": FunctionSpec("delete", ("key",)),
    "Exists": FunctionSpec("exists", ("key",)),
    "Transfer": FunctionSpec("transfer", ("key", "new_value")),
    "GetAll": FunctionSpec("get_all"),
}


def _result_bytes(result: Any) -> bytes:
    if result is None:
        return b""
    if isinstance(result, FilterRecord):
        return result.encode()
    if isinstance(result, list):
        return b"[" + b",".join(rec.encode() for rec in result) + b"]"
    return json.dumps(result, ensure_ascii=False).encode("utf-8")


class ContractDispatcher:
    def __init__(self, contract: RecordContract | None = None):
        self.contract = contract or RecordContract()

    def functions(self) -> List[str]:
        return list(FUNCTIONS)

    def _convert(self, name: str, spec: FunctionSpec, args: Sequence[str]) -> List[Any]:
        if len(args) != len(spec.params):
            raise InvalidArgumentError(
                f"{name} expects {len(spec.params)} arguments, got {len(args)}",
                {"function": name, "expected": list(spec.params)},
            )
        converted: List[Any] = []
        for param, raw in zip(spec.params, args):
            if param in spec.int_params:
                if (not isinstance(raw, str) or not INT_TEXT.fullmatch(raw)
                        or not INT64_MIN <= int(raw) <= INT64_MAX):
                    raise InvalidArgumentError(
                        f"{name}: {param} must be an integer, got {raw!r}",
                        {"function": name, "param": param},
                    )
                converted.append(int(raw))
            else:
                converted.append(raw)
        return converted

    def invoke(self, ctx: TransactionContext, function: str, args: Sequence[str] = ()) -> bytes:
        """
        Call `function` with string `args` inside `ctx`.

        Integer parameters are parsed from decimal text. Results come back as
        UTF-8 JSON: a record object, a list of records, a bool, a string, or
        empty bytes for functions without a result.
        """
        spec = FUNCTIONS.get(function)
        if spec is None:
            raise UnknownFunctionError(f"unknown function {function!r}", {"function": function})

        params = self._convert(function, spec, list(args))
        handler: Callable[..., Any] = getattr(self.contract, spec.method)
        log.debug(f"[INVOKE] fn={function} tx={ctx.tx_id}")
        return _result_bytes(handler(ctx, *params))

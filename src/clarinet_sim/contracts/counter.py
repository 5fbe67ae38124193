"""Counter contract: a single uint data var that only ever moves by ``step``."""

from __future__ import annotations

from ..config import UINT_MAX
from ..errors import ClarinetError, ErrorCode
from ..values import ResponseValue, UIntValue, types
from .base import CallContext, Contract, public, read_only

ERR_COUNTER_UNDERFLOW = 1


class Counter(Contract):
    name = "counter"
    data_vars = {"counter": UIntValue(1)}

    @public
    def increment(self, ctx: CallContext, step: UIntValue) -> ResponseValue:
        new_val = ctx.get_var("counter").value + step.value
        if new_val > UINT_MAX:
            raise ClarinetError(ErrorCode.ARITHMETIC_OVERFLOW, "counter overflow")
        ctx.set_var("counter", types.uint(new_val))
        ctx.print(
            types.tuple(
                {
                    "object": types.ascii("counter"),
                    "action": types.ascii("incremented"),
                    "value": types.uint(new_val),
                }
            )
        )
        return types.ok(types.uint(new_val))

    @public
    def decrement(self, ctx: CallContext, step: UIntValue) -> ResponseValue:
        current = ctx.get_var("counter").value
        if step.value > current:
            return types.err(types.uint(ERR_COUNTER_UNDERFLOW))
        new_val = current - step.value
        ctx.set_var("counter", types.uint(new_val))
        ctx.print(
            types.tuple(
                {
                    "object": types.ascii("counter"),
                    "action": types.ascii("decremented"),
                    "value": types.uint(new_val),
                }
            )
        )
        return types.ok(types.uint(new_val))

    @read_only
    def read_counter(self, ctx: CallContext) -> ResponseValue:
        return types.ok(ctx.get_var("counter"))

"""Ordered request pipeline.

A stage is an async callable `(request, call_next) -> response`, the same
shape as a Starlette middleware dispatch. A Pipeline composes a fixed list of
stages around an endpoint; the first stage is the outermost one.

    pipeline = Pipeline([ErrorNormalizer(log), SessionGate(log)])
    response = await pipeline.bind(call_next)(request)

Execution order per request:
1. ErrorNormalizer (wraps everything below)
2. SessionGate (may raise AuthFailure)
3. endpoint
"""

from collections.abc import Awaitable, Callable, Sequence

from fastapi import Request, Response

CallNext = Callable[[Request], Awaitable[Response]]
Stage = Callable[[Request, CallNext], Awaitable[Response]]


class Pipeline:
    """Immutable, ordered list of stages."""

    def __init__(self, stages: Sequence[Stage]):
        self.stages: tuple[Stage, ...] = tuple(stages)

    def __len__(self) -> int:
        return len(self.stages)

    def bind(self, endpoint: CallNext) -> CallNext:
        """Compose the stages around endpoint.

        Args:
            endpoint: Innermost callable (normally the middleware's call_next).

        Returns:
            A callable that runs the request through every stage in order.
        """
        handler = endpoint
        for stage in reversed(self.stages):
            handler = _link(stage, handler)
        return handler


def _link(stage: Stage, call_next: CallNext) -> CallNext:
    async def run(request: Request) -> Response:
        return await stage(request, call_next)

    return run

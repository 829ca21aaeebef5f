"""Pipeline Executor - runs one request through routing, guards, validation and handler.

Invariants:
    - Stage order is fixed: ROUTING -> GUARDING -> VALIDATING -> HANDLING -> RESPONDING
    - Any failure moves the context to FAILED and is mapped exactly once
    - Guards run before the body is read: a denied request never reaches validation
    - Handlers are synchronous: store reads and writes happen without suspension
    - Handlers and guards never build responses for error cases

Design Decisions:
    - One try/except around the whole run: a single exit path to the mapper
      (the stage recorded on the context tells where it failed)
    - Awaitable guard results supported so async guards can slot in unchanged
"""

import inspect
import json
import logging
from dataclasses import dataclass

from users_api.core.dispatch import DispatchTable, RouteDescriptor
from users_api.core.domain_types import PipelineStage
from users_api.core.errors import BodyParseError
from users_api.core.request_context import RequestContext
from users_api.core.validation import validate_payload
from users_api.services.exception_mapper import map_exception

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResponse:
    status_code: int
    body: dict


async def parse_json_object(ctx: RequestContext) -> dict:
    """Read the raw body. Empty -> {}; anything but a JSON object -> BodyParseError."""
    raw = await ctx.read_body()
    if not raw or not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        raise BodyParseError() from e
    if not isinstance(payload, dict):
        raise BodyParseError()
    return payload


class PipelineExecutor:
    """Executes requests against a dispatch table."""

    def __init__(self, table: DispatchTable):
        self._table = table

    async def execute(self, ctx: RequestContext) -> PipelineResponse:
        """Run the pipeline for ctx. Always returns a response, never raises."""
        try:
            return await self._run(ctx)
        except Exception as exc:
            failed_at = ctx.stage
            ctx.stage = PipelineStage.FAILED
            mapped = map_exception(exc, log_extra={
                "method": ctx.method, "path": ctx.path,
                "stage": failed_at.value,
            })
            return PipelineResponse(mapped.status_code, mapped.body)

    async def _run(self, ctx: RequestContext) -> PipelineResponse:
        ctx.stage = PipelineStage.ROUTING
        resolved = self._table.resolve(ctx.method, ctx.path)
        ctx.path_params = resolved.path_params
        route = resolved.route

        ctx.stage = PipelineStage.GUARDING
        await self._run_guards(route, ctx)

        ctx.stage = PipelineStage.VALIDATING
        payload = await self._prepare_payload(route, ctx)

        ctx.stage = PipelineStage.HANDLING
        body = route.handler(ctx, payload)

        ctx.stage = PipelineStage.RESPONDING
        logger.info(
            f"{ctx.method} {ctx.path} -> 200",
            extra={"method": ctx.method, "path": ctx.path, "status_code": 200},
        )
        return PipelineResponse(200, body)

    async def _run_guards(self, route: RouteDescriptor, ctx: RequestContext) -> None:
        for guard in route.guards:
            result = guard.check(ctx)
            if inspect.isawaitable(result):
                await result

    async def _prepare_payload(
        self, route: RouteDescriptor, ctx: RequestContext,
    ) -> dict | None:
        if not route.reads_body:
            return None
        payload = await parse_json_object(ctx)
        if route.schema is None:
            return payload
        return validate_payload(payload, route.schema)

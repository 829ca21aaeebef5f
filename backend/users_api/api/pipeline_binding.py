"""Pipeline Binding - hands raw FastAPI requests to the pipeline executor.

Invariants:
    - Every method/path under the API prefix not claimed by another router
      goes through PipelineExecutor.execute exactly once
    - The binding never inspects bodies or headers beyond copying them
    - The executor's (status, body) is written back verbatim as JSON

Design Decisions:
    - Catch-all route over per-endpoint FastAPI routes: the dispatch table is
      the single routing authority for /users
    - Body passed as request.body (a coroutine function): the pipeline reads
      it only after guards admit the request
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from users_api.core.request_context import RequestContext
from users_api.core.domain_types import HttpMethod

router = APIRouter(tags=["pipeline"])


@router.api_route(
    "/{path:path}", methods=[m.value for m in HttpMethod],
    include_in_schema=False,
)
async def dispatch_to_pipeline(request: Request, path: str) -> JSONResponse:
    """Feed the request into the pipeline and write its response back."""
    ctx = RequestContext(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
        read_body=request.body,
    )
    response = await request.app.state.executor.execute(ctx)
    return JSONResponse(status_code=response.status_code, content=response.body)

"""
GET /v1/registry, GET /v1/students/{lrn} -- Read-only HTTP access.

Handy for scripts and for checking the board without opening a socket.
Edits still go through the WebSocket so every viewer sees them.
"""

from fastapi import APIRouter, HTTPException, Request

from bulletin.models.schemas import StudentRequirements

router = APIRouter()


@router.get(
    "/v1/registry",
    response_model=dict[str, list[str]],
    summary="Full requirements board",
    description="Every LRN with its outstanding requirements, same shape as the `database` socket event.",
    tags=["Board"],
)
async def get_registry(request: Request) -> dict[str, list[str]]:
    return request.app.state.board.registry.snapshot()


@router.get(
    "/v1/students/{lrn}",
    response_model=StudentRequirements,
    summary="Look up one student",
    tags=["Board"],
)
async def get_student(lrn: str, request: Request) -> StudentRequirements:
    requirements = request.app.state.board.registry.lookup(lrn)

    if requirements is None:
        raise HTTPException(status_code=404, detail=f"LRN '{lrn}' is not on the board.")

    return StudentRequirements(lrn=lrn, requirements=requirements)

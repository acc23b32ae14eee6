from uuid import UUID

from fastapi import APIRouter, Depends, status

from approvaldesk.api.deps import get_workflow_engine
from approvaldesk.schemas.request import (
    CreateRequest,
    RequestAction,
    RequestDetails,
    RequestLogRead,
    RequestSummary,
)
from approvaldesk.workflow.engine import WorkflowEngine

router = APIRouter(prefix="/requests", tags=["requests"])


@router.get("/created/{user_id}", response_model=list[RequestSummary])
async def list_created_by_user(user_id: int, engine: WorkflowEngine = Depends(get_workflow_engine)):
    return await engine.get_requests_created_by_user(user_id)


@router.get("/assigned/{user_id}", response_model=list[RequestSummary])
async def list_assigned_to_user(user_id: int, engine: WorkflowEngine = Depends(get_workflow_engine)):
    return await engine.get_requests_assigned_to_user(user_id)


@router.post("", response_model=RequestSummary, status_code=status.HTTP_201_CREATED)
async def create_request(body: CreateRequest, engine: WorkflowEngine = Depends(get_workflow_engine)):
    return await engine.create_request(
        title=body.title,
        description=body.description,
        requester_id=body.requester_id,
        approver_id=body.approver_id,
        request_type_id=body.request_type_id,
    )


@router.get("/{request_id}", response_model=RequestDetails)
async def get_request_details(request_id: UUID, engine: WorkflowEngine = Depends(get_workflow_engine)):
    return await engine.get_request_details(request_id)


@router.get("/{request_id}/history", response_model=list[RequestLogRead])
async def get_request_history(request_id: UUID, engine: WorkflowEngine = Depends(get_workflow_engine)):
    return await engine.get_request_history(request_id)


@router.post("/{request_id}/approve", response_model=RequestSummary)
async def approve_request(
    request_id: UUID,
    body: RequestAction,
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    return await engine.approve_request(request_id, body.comments, body.approver_id)


@router.post("/{request_id}/reject", response_model=RequestSummary)
async def reject_request(
    request_id: UUID,
    body: RequestAction,
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    return await engine.reject_request(request_id, body.comments, body.approver_id)

from fastapi import Request

from approvaldesk.workflow.engine import WorkflowEngine


def get_workflow_engine(request: Request) -> WorkflowEngine:
    return request.app.state.workflow_engine

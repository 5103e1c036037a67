from fastapi import Request

from decktracker.storage import Workspace


def get_workspace(request: Request) -> Workspace:
    """
    Dependency that provides the process workspace.

    The workspace is opened by the application lifespan handler.
    """
    workspace: Workspace = request.app.state.workspace
    return workspace

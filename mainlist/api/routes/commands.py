"""Command endpoints: add/remove playing track, remove selection, undo/redo."""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from mainlist.api.state import AppState, get_state
from mainlist.core.selection import parse_track_references

router = APIRouter()


class RemoveSelectedBody(BaseModel):
    """Track URIs or open.spotify.com links; omit to use the stored selection."""
    tracks: Optional[List[str]] = None


@router.post("/add-current")
async def add_current(state: AppState = Depends(get_state)):
    """Add the playing track to today's MAIN playlist."""
    result = await state.commands.add_current_to_main()
    return result.to_dict()


@router.post("/remove-current")
async def remove_current(state: AppState = Depends(get_state)):
    """Remove the playing track from the playlist being played."""
    result = await state.commands.remove_current_from_context()
    return result.to_dict()


@router.post("/remove-selected")
async def remove_selected(
    body: RemoveSelectedBody | None = Body(None),
    state: AppState = Depends(get_state),
):
    """Remove the selected tracks from the playlist being played."""
    uris = None
    if body is not None and body.tracks is not None:
        try:
            uris = parse_track_references(body.tracks)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    result = await state.commands.remove_selected(uris)
    return result.to_dict()


@router.post("/undo")
async def undo(state: AppState = Depends(get_state)):
    result = await state.commands.undo()
    return result.to_dict()


@router.post("/redo")
async def redo(state: AppState = Depends(get_state)):
    result = await state.commands.redo()
    return result.to_dict()


@router.get("/history")
def get_history(state: AppState = Depends(get_state)):
    """Return undoable and redoable operations, oldest first."""
    return state.engine.history.to_dict()


@router.get("/notifications")
def get_notifications(state: AppState = Depends(get_state)):
    """Return recent notifications, newest first."""
    return [
        {"message": n.message, "is_error": n.is_error, "created_at": n.created_at}
        for n in state.notifications.recent()
    ]

"""Selected tracks, pushed by the UI that knows which rows are selected."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from mainlist.api.state import AppState, get_state

router = APIRouter()


class SelectionBody(BaseModel):
    """Track URIs (spotify:track:...) or open.spotify.com/track links."""
    tracks: List[str]


@router.get("/selection")
def get_selection(state: AppState = Depends(get_state)):
    return {"tracks": state.selection.selected_tracks()}


@router.put("/selection")
def set_selection(body: SelectionBody, state: AppState = Depends(get_state)):
    try:
        tracks = state.selection.set(body.tracks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"tracks": tracks}


@router.delete("/selection", status_code=204)
def clear_selection(state: AppState = Depends(get_state)):
    state.selection.clear()

"""MAIN playlist lookup."""
from fastapi import APIRouter, Depends, HTTPException

from mainlist.api.state import AppState, get_state
from mainlist.core.errors import MainlistError, NotLinkedError

router = APIRouter()


@router.get("/main")
async def get_main_playlist(state: AppState = Depends(get_state)):
    """Resolve today's MAIN playlist, creating it if the user has none."""
    try:
        playlist_id = await state.commands.resolve_main_playlist()
    except NotLinkedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except MainlistError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"playlist_id": playlist_id, "expected_name": state.locator.todays_name()}

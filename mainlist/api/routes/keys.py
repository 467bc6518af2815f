"""Key binding list and dispatch: the trigger surface for global hotkey tools."""
from fastapi import APIRouter, Depends, HTTPException

from mainlist.api.state import AppState, get_state
from mainlist.core.errors import UnknownBindingError

router = APIRouter()


@router.get("")
def list_bindings(state: AppState = Depends(get_state)):
    """Return combo -> command name."""
    return state.keys.bindings()


@router.post("/{combo}")
async def press(combo: str, state: AppState = Depends(get_state)):
    """Run the command bound to combo, e.g. POST /api/keys/ctrl+z."""
    try:
        result = await state.keys.dispatch(combo)
    except UnknownBindingError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return result.to_dict()

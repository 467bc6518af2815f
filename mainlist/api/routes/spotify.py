"""Spotify OAuth: auth URL, callback, manual code completion, logout."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from mainlist.api.state import AppState, get_state
from mainlist.config import MAINLIST_WEB_ORIGIN
from mainlist.core.errors import AuthError, NotLinkedError

logger = logging.getLogger(__name__)

router = APIRouter()


class CompleteLoginBody(BaseModel):
    redirect_url: Optional[str] = None
    code: Optional[str] = None


@router.get("/auth-url")
def get_auth_url(state: AppState = Depends(get_state)):
    """Return Spotify OAuth authorization URL and whether the user is logged in."""
    try:
        url = state.session.auth_url()
    except NotLinkedError as e:
        return {"auth_url": None, "error": str(e), "logged_in": False}
    return {"auth_url": url, "logged_in": state.session.is_linked()}


@router.get("/callback")
def spotify_callback(code: str | None = None, state: AppState = Depends(get_state)):
    try:
        state.session.link(code=code)
    except ValueError:
        return HTMLResponse("<body><p>Missing authorization code.</p></body>", status_code=400)
    except (AuthError, NotLinkedError) as e:
        logger.warning("Spotify callback failed: %s", e)
        return HTMLResponse("<body><p>Failed to link Spotify. Check backend logs.</p></body>", status_code=502)
    if MAINLIST_WEB_ORIGIN:
        return RedirectResponse(url=f"{MAINLIST_WEB_ORIGIN.rstrip('/')}/?spotify=success", status_code=302)
    return HTMLResponse("<body><p>Spotify linked. You can close this window.</p></body>")


@router.post("/complete-login")
def complete_login(body: CompleteLoginBody, state: AppState = Depends(get_state)):
    """Link the account from a pasted redirect URL or bare code (headless setups)."""
    try:
        state.session.link(code=body.code, redirect_url=body.redirect_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotLinkedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except AuthError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True}


@router.post("/logout")
async def logout(state: AppState = Depends(get_state)):
    """Clear the Spotify token and the undo history that belongs to this account."""
    state.session.logout()
    await state.engine.clear_history()
    return {"ok": True}

"""Session endpoints under /api.

A renderer drives the single in-memory session through these routes and
polls GET /session for the current snapshot (progress value, revealed
flags, typewriter text). Every mutating endpoint returns the new snapshot.
"""

from fastapi import APIRouter, HTTPException, Request

from frost_journey import script
from frost_journey.models import ScriptContent, SessionSnapshot, SubmitResult
from frost_journey.session import NarrativeSession

from .models import AdvanceBody, ReplyBody

router = APIRouter()


def _session(request: Request) -> NarrativeSession:
    return request.app.state.session


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/script", response_model=ScriptContent)
async def get_script():
    """Scene text, buttons, artifacts, phrases and reveal lines."""
    return script.content()


@router.get("/session", response_model=SessionSnapshot)
async def get_session(request: Request):
    """Current snapshot of the session."""
    return _session(request).snapshot()


@router.post("/session/advance", response_model=SessionSnapshot)
async def advance(request: Request, body: AdvanceBody):
    """Request an explicit scene change. Unmet guards leave the scene as is."""
    session = _session(request)
    session.advance(body.target)
    return session.snapshot()


@router.post("/session/confirm", response_model=SessionSnapshot)
async def confirm(request: Request):
    """Begin the journey from the title card."""
    session = _session(request)
    session.confirm()
    return session.snapshot()


@router.post("/session/press/start", response_model=SessionSnapshot)
async def press_start(request: Request):
    """The viewer pressed and is holding the survey button."""
    session = _session(request)
    session.press_start()
    return session.snapshot()


@router.post("/session/press/end", response_model=SessionSnapshot)
async def press_end(request: Request):
    """The viewer released the survey button."""
    session = _session(request)
    session.press_end()
    return session.snapshot()


@router.post("/session/explore", response_model=SessionSnapshot)
async def explore(request: Request):
    """Reveal the next artifact, or move on once all are shown."""
    session = _session(request)
    session.explore()
    return session.snapshot()


@router.post("/session/phrases/{index}/dismiss", response_model=SessionSnapshot)
async def dismiss_phrase(request: Request, index: int):
    """Dismiss one of the scattered phrases."""
    session = _session(request)
    try:
        session.dismiss(index)
    except IndexError:
        raise HTTPException(404, "Phrase not found")
    return session.snapshot()


@router.post("/session/reply", response_model=SessionSnapshot)
async def reply(request: Request, body: ReplyBody):
    """Send the viewer's words to Frost. The reply is typed out afterwards."""
    session = _session(request)
    result = session.submit(body.message)
    if result == SubmitResult.EMPTY:
        raise HTTPException(400, "Message is empty")
    if result == SubmitResult.BUSY:
        raise HTTPException(409, "Frost is still answering")
    if result == SubmitResult.CLOSED:
        raise HTTPException(409, "The conversation is not open")
    return session.snapshot()


@router.post("/session/reset", response_model=SessionSnapshot)
async def reset(request: Request):
    """Return to the title card with every counter, flag and reply cleared."""
    session = _session(request)
    session.reset()
    return session.snapshot()


@router.get("/session/image")
async def get_image(request: Request):
    """The portrait as base64, or null when none is held."""
    return {"image": _session(request).satellites.portrait.image}

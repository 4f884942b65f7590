"""HTTP surface tests, driving the app in-process through httpx's ASGI transport."""

import httpx
import pytest

from frost_journey import script
from frost_journey.api import create_app
from frost_journey.models import SceneId


@pytest.fixture
async def client(session):
    app = create_app(session=session)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_health(client) -> None:
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_script_content(client) -> None:
    resp = await client.get("/api/script")
    assert resp.status_code == 200
    body = resp.json()
    assert body["character"] == script.CHARACTER_NAME
    assert body["scenes"]["5"] == ["人是什么？"]
    assert len(body["artifacts"]) == 12
    assert len(body["phrases"]) == 7
    assert body["buttons"]["begin"] == script.BUTTON_LABELS["begin"]
    assert list(body["passage_lines"]) == ["line_1", "line_2", "line_3", "line_4"]
    assert body["conversation_lines"]["line_a"] == "这就是弗洛斯特。"


async def test_script_lines_match_snapshot_flags(client) -> None:
    content = (await client.get("/api/script")).json()
    snap = (await client.get("/api/session")).json()
    assert set(content["passage_lines"]) == set(snap["passage_lines"])
    assert set(content["conversation_lines"]) == set(snap["conversation_reveals"])


async def test_initial_snapshot(client) -> None:
    resp = await client.get("/api/session")
    assert resp.status_code == 200
    body = resp.json()
    assert body["scene"] == 1
    assert body["artifacts"] == {"shown": 2, "total": 12}
    assert body["reply"]["status"] == "idle"


async def test_confirm_and_advance(client) -> None:
    resp = await client.post("/api/session/confirm")
    assert resp.json()["scene"] == 2
    assert resp.json()["audio_playing"] is True
    resp = await client.post("/api/session/advance", json={"target": 3})
    assert resp.json()["scene"] == 3


async def test_invalid_advance_is_a_no_op(client) -> None:
    resp = await client.post("/api/session/advance", json={"target": 9})
    assert resp.status_code == 200
    assert resp.json()["scene"] == 1


async def test_advance_requires_integer_target(client) -> None:
    resp = await client.post("/api/session/advance", json={"target": "north"})
    assert resp.status_code == 422


async def test_press_and_release(client, scheduler) -> None:
    await client.post("/api/session/confirm")
    await client.post("/api/session/advance", json={"target": 3})
    await client.post("/api/session/press/start")
    scheduler.advance(1000)
    body = (await client.get("/api/session")).json()
    assert body["progress"]["holding"] is True
    assert body["progress"]["value"] == pytest.approx(20.0)
    body = (await client.post("/api/session/press/end")).json()
    assert body["progress"] == {"holding": False, "value": 0.0, "completed": False}


async def test_explore(client, session, drive) -> None:
    drive(session, SceneId.INVENTORY)
    body = (await client.post("/api/session/explore")).json()
    assert body["artifacts"]["shown"] == 3
    assert len(body["visible_artifacts"]) == 3


async def test_dismiss_phrase(client, session, drive) -> None:
    drive(session, SceneId.QUESTION)
    body = (await client.post("/api/session/phrases/3/dismiss")).json()
    assert body["phrases"]["dismissed"] == [3]
    assert body["phrases_complete"] is False


async def test_dismiss_unknown_phrase(client, session, drive) -> None:
    drive(session, SceneId.QUESTION)
    resp = await client.post("/api/session/phrases/42/dismiss")
    assert resp.status_code == 404


async def test_reply_outside_conversation_is_rejected(client) -> None:
    resp = await client.post("/api/session/reply", json={"message": "你好"})
    assert resp.status_code == 409


async def test_reply_flow(client, session, drive, scheduler) -> None:
    drive(session, SceneId.CONVERSATION)
    await session.settle()
    scheduler.advance(6500)

    resp = await client.post("/api/session/reply", json={"message": "   "})
    assert resp.status_code == 400

    resp = await client.post("/api/session/reply", json={"message": "你好"})
    assert resp.status_code == 200
    assert resp.json()["reply"]["status"] == "pending"

    resp = await client.post("/api/session/reply", json={"message": "再说一次"})
    assert resp.status_code == 409

    await session.settle()
    scheduler.advance(1000)
    body = (await client.get("/api/session")).json()
    assert body["reply"]["displayed_text"] == "冰原很安静。"


async def test_image(client, session, drive) -> None:
    assert (await client.get("/api/session/image")).json() == {"image": None}
    drive(session, SceneId.CONVERSATION)
    await session.settle()
    body = (await client.get("/api/session/image")).json()
    assert isinstance(body["image"], str) and body["image"]


async def test_reset(client, session, drive) -> None:
    drive(session, SceneId.QUESTION)
    body = (await client.post("/api/session/reset")).json()
    assert body["scene"] == 1
    assert body["artifacts"]["shown"] == 2

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from core.entities import IntentPayload
from core.router import Assistant, build_assistant
from core.session import SessionStore
from util.config import Settings, configure_logging


logger = logging.getLogger(__name__)


class EntityModel(BaseModel):
    kind: str
    text: str = ""
    resolved_values: list[Any] = Field(default_factory=list)


class TurnRequest(BaseModel):
    session_id: str
    intent: str
    entities: list[EntityModel] = Field(default_factory=list)
    text: str = ""
    user_location: str | None = None


class TurnResponse(BaseModel):
    messages: list[str]
    listing: dict | None = None
    choices: list[str] = Field(default_factory=list)
    map_url: str | None = None


def create_app(assistant: Assistant | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    assistant = assistant or build_assistant(settings)
    sessions = SessionStore(idle_seconds=settings.session_idle_minutes * 60)

    app = FastAPI(title="Calendar & Places Assistant API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.sessions = sessions
    app.state.assistant = assistant

    @app.post("/api/turn", response_model=TurnResponse)
    def turn(req: TurnRequest):
        payload = IntentPayload.from_dict(req.model_dump())
        sess = sessions.get(req.session_id)
        # turns of one conversation never interleave
        with sess.lock:
            reply = assistant.handle_turn(payload, sess)
        return reply.to_dict()

    @app.delete("/api/sessions/{session_id}")
    def end_session(session_id: str):
        removed = sessions.discard(session_id)
        logger.info("Conversation %s ended (had state: %s)", session_id, removed)
        return {"removed": removed}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=3978)

"""
FastAPI Backend Server

Exposes the support agent as REST endpoints for the chat UI:

    POST /api/query      {"query": "..."}
    POST /api/followup   {"followUpQuery": "..."}
    GET  /api/health

Run with:
    uvicorn api_server:app --port 5000
"""

from contextlib import asynccontextmanager
from typing import List

import aiohttp
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from customerbot.config import settings
from customerbot.errors import RequestFailed
from customerbot.logger import init_logging, get_logger
from customerbot.messages import msg
from customerbot.pipeline.agent import SupportAgent, create_agent

init_logging()
logger = get_logger(__name__)


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# Pydantic models for API
class QueryRequest(BaseModel):
    query: str = Field(..., max_length=2000)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class FollowUpRequest(BaseModel):
    followUpQuery: str = Field(..., max_length=2000)

    @field_validator("followUpQuery")
    @classmethod
    def follow_up_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class QueryResponse(BaseModel):
    query: str
    facts: List[str]
    response: str
    followUpSuggestions: List[str]


class FollowUpResponse(BaseModel):
    followUpQuery: str
    facts: List[str]
    followUpResponse: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the shared HTTP session and the agent built on it."""
    settings.validate_all()
    async with aiohttp.ClientSession() as session:
        app.state.agent = create_agent(session, settings)
        logger.info(f"✅ Agentic CustomerBot ready (knowledge base: {settings.knowledge.path})")
        yield
        app.state.agent = None


app = FastAPI(
    title="Agentic CustomerBot API",
    description="Grounded customer support answers from the FAQ knowledge base",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_agent(request: Request) -> SupportAgent:
    """Get the agent instance."""
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(status_code=503, detail=msg("error.agent_not_ready"))
    return agent


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/query", response_model=QueryResponse)
async def query(request: QueryRequest, agent: SupportAgent = Depends(get_agent)):
    """Answer a new question with facts and follow-up suggestions."""
    try:
        result = await agent.handle_query(request.query)
    except RequestFailed as e:
        logger.error(f"Main query error: {e}")
        return JSONResponse(status_code=500, content={"error": msg("error.query_failed")})
    except Exception:
        logger.exception("Unexpected error while handling query")
        return JSONResponse(status_code=500, content={"error": msg("error.query_failed")})

    return result.to_dict()


@app.post("/api/followup", response_model=FollowUpResponse)
async def followup(request: FollowUpRequest, agent: SupportAgent = Depends(get_agent)):
    """Answer a follow-up question (no further suggestions)."""
    try:
        result = await agent.handle_follow_up(request.followUpQuery)
    except RequestFailed as e:
        logger.error(f"Follow-up error: {e}")
        return JSONResponse(status_code=500, content={"error": msg("error.followup_failed")})
    except Exception:
        logger.exception("Unexpected error while handling follow-up")
        return JSONResponse(status_code=500, content={"error": msg("error.followup_failed")})

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_server:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development
    )

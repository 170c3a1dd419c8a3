"""
Prompt Search - FastAPI service for the prompt catalog

Endpoints:
- POST /v1/search: BM25 search with synonyms and category/tag filters
- GET /v1/prompts/{id}/related: related prompts for a prompt page
- POST /v1/recommendations: "for you" recommendations from user signals

The catalog is read once at startup from a JSON registry file and kept in
memory; POST /v1/registry/reload re-reads it and rebuilds the search index.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Literal, Optional

# Load .env.local first (highest priority), then .env as fallback
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

from .logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/prompt-search.log"),
    console_level=getattr(logging, log_level, logging.INFO),
    file_level=logging.DEBUG,
)

logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .models import RecommendationPreferences, UserSignals
from .recommendations import get_for_you_recommendations, get_related_recommendations
from .registry import PromptRecord, PromptRegistry, RegistryError, load_registry
from .search import search_prompts

# Configuration from environment variables
REGISTRY_PATH = os.getenv("PROMPT_REGISTRY_PATH", "data/prompts.json")
PORT = int(os.getenv("PORT", "8080"))

APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)

registry: Optional[PromptRegistry] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the prompt registry on startup"""
    global registry

    logger.info(f"Loading prompt registry from {REGISTRY_PATH}...")
    try:
        registry = load_registry(REGISTRY_PATH)
    except RegistryError as e:
        logger.error(f"Failed to load prompt registry: {e}")
        raise

    yield

    logger.info("Shutting down...")
    registry = None


app = FastAPI(
    title="Prompt Search API",
    description="Search and recommendations over the prompt catalog",
    version=APP_VERSION,
    lifespan=lifespan,
)


def get_registry() -> PromptRegistry:
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Prompt registry not loaded",
        )
    return registry


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    prompt_count: int
    registry_version: Optional[str] = None
    started_at: str
    uptime_seconds: float


class SearchRequest(BaseModel):
    query: str = Field(..., description="Search query", min_length=1, max_length=500)
    limit: int = Field(default=20, ge=1, le=100, description="Max number of results")
    category: Optional[str] = Field(default=None, description="Only prompts in this category")
    tags: Optional[List[str]] = Field(default=None, description="Only prompts with any of these tags")
    expand_synonyms: bool = Field(default=True, description="Also match synonyms of query words")


class SearchResultItem(BaseModel):
    prompt: PromptRecord
    score: float
    matched_fields: List[str]


class SearchResponse(BaseModel):
    query: str
    results: List[SearchResultItem]
    total: int


class RecommendationItem(BaseModel):
    prompt: PromptRecord
    score: float
    reasons: List[str]


class RelatedResponse(BaseModel):
    prompt_id: str
    recommendations: List[RecommendationItem]
    total: int


class PreferencesModel(BaseModel):
    tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    exclude_tags: List[str] = Field(default_factory=list)
    exclude_categories: List[str] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    viewed_ids: List[str] = Field(default_factory=list, description="Prompt ids the user viewed")
    saved_ids: List[str] = Field(default_factory=list, description="Prompt ids the user saved")
    run_ids: List[str] = Field(default_factory=list, description="Prompt ids the user ran")
    preferences: Optional[PreferencesModel] = None
    exclude_ids: List[str] = Field(default_factory=list)
    limit: int = Field(default=5, ge=1, le=50)


class RecommendationResponse(BaseModel):
    mode: Literal["for_you", "featured"]
    recommendations: List[RecommendationItem]
    total: int


class ReloadResponse(BaseModel):
    prompt_count: int
    invalid_count: int
    registry_version: Optional[str] = None


def _resolve_ids(reg: PromptRegistry, ids: List[str]) -> list:
    prompts = []
    for prompt_id in ids:
        prompt = reg.get(prompt_id)
        if prompt is None:
            logger.debug(f"Ignoring unknown prompt id in signals: {prompt_id}")
            continue
        prompts.append(prompt)
    return prompts


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Prompt Search API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health(reg: PromptRegistry = Depends(get_registry)):
    """Health check endpoint"""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        prompt_count=len(reg),
        registry_version=reg.version,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=round(uptime, 2),
    )


@app.post("/v1/search", response_model=SearchResponse)
async def search(request: SearchRequest, reg: PromptRegistry = Depends(get_registry)):
    """Rank catalog prompts by BM25 relevance to the query"""
    results = search_prompts(
        request.query,
        limit=request.limit,
        category=request.category,
        tags=request.tags,
        expand_synonyms=request.expand_synonyms,
        index=reg.index,
    )
    logger.info(f"Search '{request.query}' returned {len(results)} results")

    return SearchResponse(
        query=request.query,
        results=[SearchResultItem(**r.to_dict()) for r in results],
        total=len(results),
    )


@app.get("/v1/prompts/{prompt_id}", response_model=PromptRecord)
async def get_prompt(prompt_id: str, reg: PromptRegistry = Depends(get_registry)):
    """Get a single prompt"""
    prompt = reg.get(prompt_id)
    if prompt is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Prompt {prompt_id} not found",
        )
    return PromptRecord(**prompt.to_dict())


@app.get("/v1/prompts/{prompt_id}/related", response_model=RelatedResponse)
async def related(
    prompt_id: str,
    limit: int = Query(default=5, ge=1, le=50),
    min_score: float = Query(default=0.0, ge=0.0),
    reg: PromptRegistry = Depends(get_registry),
):
    """Prompts related to the given prompt"""
    source = reg.get(prompt_id)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Prompt {prompt_id} not found",
        )

    results = get_related_recommendations(
        source,
        reg.prompts,
        limit=limit,
        min_score=min_score,
        index=reg.index,
    )

    return RelatedResponse(
        prompt_id=prompt_id,
        recommendations=[RecommendationItem(**r.to_dict()) for r in results],
        total=len(results),
    )


@app.post("/v1/recommendations", response_model=RecommendationResponse)
async def recommendations(request: RecommendationRequest, reg: PromptRegistry = Depends(get_registry)):
    """Personalized recommendations from viewed/saved/run prompts and preferences"""
    preferences = (
        RecommendationPreferences(**request.preferences.model_dump())
        if request.preferences else None
    )
    signals = UserSignals(
        viewed=_resolve_ids(reg, request.viewed_ids),
        saved=_resolve_ids(reg, request.saved_ids),
        runs=_resolve_ids(reg, request.run_ids),
        preferences=preferences,
    )

    has_history = bool(signals.viewed or signals.saved or signals.runs)
    has_preferences = bool(preferences and preferences.has_positive())
    mode = "for_you" if has_history or has_preferences else "featured"

    results = get_for_you_recommendations(
        signals,
        reg.prompts,
        limit=request.limit,
        exclude_ids=request.exclude_ids,
    )
    logger.info(f"Recommendations ({mode}): {len(results)} results")

    return RecommendationResponse(
        mode=mode,
        recommendations=[RecommendationItem(**r.to_dict()) for r in results],
        total=len(results),
    )


@app.post("/v1/registry/reload", response_model=ReloadResponse)
async def reload_registry(reg: PromptRegistry = Depends(get_registry)):
    """Re-read the registry file and rebuild the search index"""
    try:
        reg.reload()
    except RegistryError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to reload registry: {str(e)}",
        )

    return ReloadResponse(
        prompt_count=len(reg),
        invalid_count=reg.invalid_count,
        registry_version=reg.version,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prompt_search.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )

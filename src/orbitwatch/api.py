"""HTTP proxy in front of NASA's APOD, EONET, Mars rover and NEO APIs, plus a keyword chatbot."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from orbitwatch.chatbot import reply_to
from orbitwatch.config import configure_logging, get_settings
from orbitwatch.ingest.nasa_api import InvalidRequestError, NASAAPIClient
from orbitwatch.processing.visualization import process_neo_data

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(title="orbitwatch")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_client() -> NASAAPIClient:
    return NASAAPIClient()


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _relay(action: str, fetch: Callable[[], Any]) -> Any:
    """Run an upstream call, turning any failure into a 500 error payload."""
    try:
        return fetch()
    except Exception as exc:
        logger.exception("Failed to %s", action)
        return JSONResponse(
            status_code=500,
            content={"error": f"Failed to {action}", "details": str(exc)},
        )


# ============================================================================
# APOD
# ============================================================================

@app.get("/")
def apod(client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch Astronomy Picture of the Day", client.apod)


# ============================================================================
# MARS ROVERS
# ============================================================================

@app.get("/mars/rovers")
def mars_rovers(client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch Mars rovers", client.mars_rovers)


@app.get("/mars/photos")
def mars_photos(
    rover: Optional[str] = None,
    earth_date: Optional[str] = None,
    camera: Optional[str] = None,
    page: Optional[int] = None,
    client: NASAAPIClient = Depends(get_client),
):
    """Rover photos, or the rover manifest when no photo filter is given."""
    if not rover:
        return _bad_request("Rover name is required")
    try:
        return client.mars_photos(rover, earth_date=earth_date, camera=camera, page=page)
    except InvalidRequestError as exc:
        return _bad_request(str(exc))
    except Exception as exc:
        logger.exception("Failed to fetch rover data")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch rover data", "details": str(exc)})


# ============================================================================
# EONET
# ============================================================================

@app.get("/eonet/events")
def eonet_events(
    limit: int = 50,
    days: int = 30,
    category: Optional[str] = None,
    source: Optional[str] = None,
    status: str = "open",
    client: NASAAPIClient = Depends(get_client),
):
    return _relay(
        "fetch Earth Observatory Natural Event Tracker events",
        lambda: client.eonet_events(limit=limit, days=days, status=status, category=category, source=source),
    )


@app.get("/eonet/categories")
def eonet_categories(client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch EONET categories", client.eonet_categories)


@app.get("/eonet/sources")
def eonet_sources(client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch EONET sources", client.eonet_sources)


# ============================================================================
# NEAR EARTH OBJECTS
# ============================================================================

@app.get("/neo/feed")
def neo_feed(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    client: NASAAPIClient = Depends(get_client),
):
    try:
        return client.neo_feed(start_date, end_date)
    except InvalidRequestError as exc:
        return _bad_request(str(exc))
    except Exception as exc:
        logger.exception("Failed to fetch NEO feed")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch Near Earth Object feed", "details": str(exc)},
        )


@app.get("/neo/browse")
def neo_browse(page: int = 0, size: int = 20, sort: str = "id", client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch NEO browse data", lambda: client.neo_browse(page=page, size=size, sort=sort))


@app.get("/neo/{neo_id}")
def neo_by_id(neo_id: str, client: NASAAPIClient = Depends(get_client)):
    return _relay("fetch NEO by ID", lambda: client.neo_by_id(neo_id))


@app.get("/neo/{neo_id}/visualization")
def neo_visualization(neo_id: str, client: NASAAPIClient = Depends(get_client)):
    """Fetch one NEO and return its trend, statistics and hazard assessment."""
    result = _relay("fetch processed NEO data", lambda: process_neo_data(client.neo_by_id(neo_id)))
    if isinstance(result, JSONResponse):
        return result
    return Response(content=result.to_json(), media_type="application/json")


# ============================================================================
# CHATBOT
# ============================================================================

class ChatRequest(BaseModel):
    message: Optional[str] = None


@app.post("/api/chat")
def chat(body: Optional[ChatRequest] = None, client: NASAAPIClient = Depends(get_client)):
    """Answer a free-text question from whichever NASA API its keywords point at."""
    if body is None or not body.message:
        return JSONResponse(status_code=400, content={"reply": "Please provide a message."})
    try:
        return {"reply": reply_to(body.message, client)}
    except Exception:
        logger.exception("Failed to answer chat message")
        return JSONResponse(status_code=500, content={"reply": "Sorry, there was an error processing your request."})


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("orbitwatch.api:app", host="127.0.0.1", port=3000, reload=True)

"""FastAPI application exposing the listing search pipeline."""

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import HOST, LOG_FORMAT, LOG_LEVEL, PORT
from .data_loader import get_listing, load_listings_df
from .exceptions import InvalidCriteriaError, ListingNotFoundError
from .format import available_rooms_from_df, make_listing_card
from .logging import get_logger, setup_logging
from .mock_data import (
    AVAILABILITY_CATEGORIES,
    LOCATIONS,
    PRICE_RANGES,
    PROMOTION_TYPES,
    SORT_STRATEGIES,
    SUBWAY_STATIONS,
    UNIVERSITIES,
)
from .search import run_query_pipeline

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = get_logger(__name__)

app = FastAPI(title="Gosiwon Search API")


@app.post("/api/search")
async def search_endpoint(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})
    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content={"error": "Request body must be an object"})
    query = body.get("query") or None
    criteria = body.get("criteria") or None
    if criteria is not None and not isinstance(criteria, dict):
        return JSONResponse(status_code=400, content={"error": "criteria must be an object"})

    try:
        return run_query_pipeline(criteria=criteria, query=query, strict=True)
    except InvalidCriteriaError as e:
        logger.warning("Rejected criteria: %s", e)
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:
        # Return a JSON error payload instead of HTML to help clients debug
        logger.exception("Search pipeline failed")
        return JSONResponse(status_code=500, content={"error": str(e)})


@app.get("/api/options")
async def options_endpoint() -> Dict[str, Any]:
    return {
        "regions": LOCATIONS,
        "subway_stations": SUBWAY_STATIONS,
        "universities": UNIVERSITIES,
        "price_ranges": PRICE_RANGES,
        "promotion_types": PROMOTION_TYPES,
        "availability_categories": AVAILABILITY_CATEGORIES,
        "sort_strategies": SORT_STRATEGIES,
    }


@app.get("/api/listings/{listing_id}")
async def listing_endpoint(listing_id: str) -> Dict[str, Any]:
    try:
        return make_listing_card(get_listing(listing_id))
    except ListingNotFoundError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})


@app.get("/api/rooms/available")
async def available_rooms_endpoint() -> Dict[str, Any]:
    rooms = available_rooms_from_df(load_listings_df())
    return {"count": len(rooms), "rooms": rooms}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("roomfinder.app:app", host=HOST, port=PORT, reload=True)

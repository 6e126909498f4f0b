import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.core.layout_config import LayoutConfig, TickEndPolicy
from src.services.db_service import DatabaseService
from src.services.seed_service import seed_from_directory
from src.services.timeline_service import TimelineService
from src.webserver.config import ServerConfig
from src.webserver.validation import (
    TimeRangeQuery,
    parse_flag,
    validate_tick_budget,
    validate_time_range_query,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    config: ServerConfig, layout_config: Optional[LayoutConfig] = None
) -> FastAPI:
    """
    Factory function to create the FastAPI app with the given configuration.

    File databases get a fresh connection per request. An in-memory
    database only lives as long as its connection, so it is opened once,
    seeded from config.seed_dir if set, and shared.
    """
    layout_config = layout_config or LayoutConfig()
    app = FastAPI(title="Hangar Timeline API")

    shared_db: Optional[DatabaseService] = None
    if config.db_path == ":memory:":
        shared_db = DatabaseService(config.db_path)
        shared_db.connect()
        if config.seed_dir:
            seed_from_directory(shared_db, config.seed_dir)

    # Requests run in a threadpool; the shared connection serves one at a time
    shared_lock = threading.Lock()

    @contextmanager
    def db_session() -> Iterator[DatabaseService]:
        if shared_db is not None:
            with shared_lock:
                yield shared_db
            return
        service = DatabaseService(db_path=config.db_path)
        service.connect()
        try:
            yield service
        finally:
            service.close()

    def validated(request: Request) -> Any:
        """Returns a TimeRangeQuery, or a 400 response when invalid."""
        validation = validate_time_range_query(request.query_params)
        if not validation.is_valid:
            return _error(400, validation.error)
        return validation.data

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    @app.get("/api/flights")
    def get_flights(request: Request) -> Any:
        """
        Flights whose scheduled departure lies inside [startTime, endTime).
        """
        query = validated(request)
        if not isinstance(query, TimeRangeQuery):
            return query
        try:
            with db_session() as db:
                flights = TimelineService(db).flights_for(query.window)
        except Exception as e:
            logger.error(f"Error fetching flights: {e}", exc_info=True)
            return _error(500, "Failed to fetch flights")

        return {
            "flights": [flight.to_dict() for flight in flights],
            "timeRange": query.to_dict(),
            "count": len(flights),
        }

    @app.get("/api/work-packages")
    def get_work_packages(request: Request) -> Any:
        """
        Work packages overlapping (startTime, endTime).
        """
        query = validated(request)
        if not isinstance(query, TimeRangeQuery):
            return query
        try:
            with db_session() as db:
                work_packages = TimelineService(db).work_packages_for(query.window)
        except Exception as e:
            logger.error(f"Error fetching work packages: {e}", exc_info=True)
            return _error(500, "Failed to fetch work packages")

        return {
            "workPackages": [wp.to_dict() for wp in work_packages],
            "timeRange": query.to_dict(),
            "count": len(work_packages),
        }

    @app.get("/api/timeline")
    def get_timeline(request: Request) -> Any:
        """
        Computed layout (header ticks, rows, block geometry) for the window.

        roundTicks=true extends the ticks to the next whole hour. Windows
        needing more than config.max_timeline_ticks ticks are rejected.
        """
        query = validated(request)
        if not isinstance(query, TimeRangeQuery):
            return query

        round_ticks = parse_flag(request.query_params.get("roundTicks"), "roundTicks")
        if not round_ticks.is_valid:
            return _error(400, round_ticks.error)

        cfg = layout_config
        if round_ticks.data:
            cfg = replace(layout_config, tick_end_policy=TickEndPolicy.ROUND_UP_TO_HOUR)

        budget = validate_tick_budget(query.window, cfg, config.max_timeline_ticks)
        if not budget.is_valid:
            return _error(400, budget.error)

        try:
            with db_session() as db:
                layout = TimelineService(db, cfg).layout_for(query.window)
        except Exception as e:
            logger.error(f"Error building timeline layout: {e}", exc_info=True)
            return _error(500, "Failed to build timeline layout")

        return {"timeRange": query.to_dict(), **layout.to_dict()}

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app

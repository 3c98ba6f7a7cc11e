"""FastAPI application: entry point for the spa planner service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from pydantic import ValidationError

from zenspace.config import Settings, configure_logging, get_settings
from zenspace.controller import PlannerController
from zenspace.domain.errors import (
    MalformedInputError,
    NotFoundError,
    RepositoryError,
    SpaceInUseError,
)
from zenspace.domain.handlers import HandlerRegistry
from zenspace.domain.models import (
    AssistantRequest,
    AssistantResponse,
    Booking,
    CandidateBooking,
    CheckRequest,
    DailyStats,
    DraftRequest,
    LoadReport,
    Notice,
    Planning,
    RescheduleRequest,
    Space,
    SpaceCreate,
    SubmitResponse,
)
from zenspace.repos.memory import create_memory_repository
from zenspace.repos.supabase import SupabaseRepository
from zenspace.services.assistant import SchedulingAssistant
from zenspace.services.planning import slot_time


def build_controller(settings: Settings) -> PlannerController:
    """Wire the repository and assistant selected by *settings*."""
    if settings.BACKEND == "supabase":
        repository = SupabaseRepository(
            settings.SUPABASE_URL,
            settings.SUPABASE_KEY,
            timeout=settings.REPOSITORY_TIMEOUT_SECONDS,
            read_retries=settings.REPOSITORY_READ_RETRIES,
            backoff_seconds=settings.REPOSITORY_BACKOFF_SECONDS,
        )
    else:
        repository = create_memory_repository(seed=settings.SEED_DEMO_DATA)

    client = (
        AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        if settings.OPENAI_API_KEY
        else None
    )
    assistant = SchedulingAssistant(
        client,
        model=settings.OPENAI_MODEL,
        timeout=settings.ASSISTANT_TIMEOUT_SECONDS,
    )
    return PlannerController(
        repository,
        assistant,
        opening_hour=settings.OPENING_HOUR,
        closing_hour=settings.CLOSING_HOUR,
    )


def _error(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(controller: PlannerController | None = None) -> FastAPI:
    """Build the app around *controller* (or one wired from settings)."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    if controller is None:
        controller = build_controller(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await controller.load()
        yield
        aclose = getattr(controller.repository, "aclose", None)
        if aclose is not None:
            await aclose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.controller = controller
    app.state.handlers = HandlerRegistry(controller.bus)

    app.add_exception_handler(MalformedInputError, _error(422))
    app.add_exception_handler(ValidationError, _error(422))
    app.add_exception_handler(NotFoundError, _error(404))
    app.add_exception_handler(SpaceInUseError, _error(409))
    app.add_exception_handler(RepositoryError, _error(502))

    async def _ensure_date(day: str | None) -> None:
        if day and day != controller.selected_date:
            await controller.select_date(day)

    # ── Planning views ───────────────────────────────────────────────────

    @app.get("/planning", response_model=Planning)
    async def get_planning(date: str | None = None) -> Planning:
        """Space-by-space timeline for the selected (or given) date."""
        await _ensure_date(date)
        return controller.planning()

    @app.get("/dashboard", response_model=DailyStats)
    async def get_dashboard(date: str | None = None) -> DailyStats:
        await _ensure_date(date)
        return controller.stats()

    @app.get("/notices", response_model=list[Notice])
    def list_notices() -> list[Notice]:
        """Return and clear pending warnings (failed writes, overbookings)."""
        return app.state.handlers.drain()

    # ── Bookings ─────────────────────────────────────────────────────────

    @app.get("/bookings", response_model=list[Booking])
    async def list_bookings(date: str | None = None) -> list[Booking]:
        await _ensure_date(date)
        return controller.bookings

    @app.post("/bookings/draft", response_model=CandidateBooking)
    def new_booking_draft(body: DraftRequest) -> CandidateBooking:
        """Pre-filled form for a click on the grid (or the "book" button)."""
        start_time = body.start_time
        if start_time is None and body.offset_minutes is not None:
            start_time = slot_time(body.offset_minutes, controller.opening_hour)
        return controller.new_booking_draft(body.space_id, start_time)

    @app.post("/bookings/draft/reschedule", response_model=CandidateBooking)
    def reschedule_draft(body: RescheduleRequest) -> CandidateBooking:
        """Recompute start, duration and end after one of them was edited."""
        return controller.reschedule_draft(
            body.candidate,
            start_time=body.start_time,
            duration_minutes=body.duration_minutes,
            end_time=body.end_time,
        )

    @app.get("/bookings/{booking_id}/draft", response_model=CandidateBooking)
    def edit_booking_draft(booking_id: str) -> CandidateBooking:
        return controller.edit_booking_draft(booking_id)

    @app.post("/bookings/check", response_model=LoadReport | None)
    async def check_booking(body: CheckRequest) -> LoadReport | None:
        """Live capacity report for the form; null when the space is unknown."""
        return await controller.check_capacity(body.candidate, body.exclude_id)

    @app.post("/bookings", response_model=SubmitResponse, status_code=201)
    async def create_booking(candidate: CandidateBooking) -> SubmitResponse:
        booking, report = await controller.submit_booking(candidate)
        return SubmitResponse(booking=booking, load=report)

    @app.put("/bookings/{booking_id}", response_model=SubmitResponse)
    async def update_booking(
        booking_id: str, candidate: CandidateBooking
    ) -> SubmitResponse:
        booking, report = await controller.submit_booking(candidate, booking_id)
        return SubmitResponse(booking=booking, load=report)

    @app.delete("/bookings/{booking_id}", status_code=200)
    async def delete_booking(booking_id: str) -> dict:
        await controller.delete_booking(booking_id)
        return {"status": "deleted"}

    # ── Spaces ───────────────────────────────────────────────────────────

    @app.get("/spaces", response_model=list[Space])
    def list_spaces() -> list[Space]:
        return controller.spaces

    @app.post("/spaces", response_model=Space, status_code=201)
    async def create_space(body: SpaceCreate) -> Space:
        return await controller.add_space(body.name, body.type, body.capacity)

    @app.put("/spaces/{space_id}", response_model=Space)
    async def update_space(space_id: str, body: SpaceCreate) -> Space:
        return await controller.update_space(Space(id=space_id, **body.model_dump()))

    @app.delete("/spaces/{space_id}", status_code=200)
    async def delete_space(space_id: str) -> dict:
        await controller.delete_space(space_id)
        return {"status": "deleted"}

    # ── Assistant ────────────────────────────────────────────────────────

    @app.post("/assistant", response_model=AssistantResponse)
    async def ask_assistant(body: AssistantRequest) -> AssistantResponse:
        return AssistantResponse(text=await controller.ask_assistant(body.prompt))

    return app


app = create_app()

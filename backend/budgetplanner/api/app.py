"""FastAPI application — create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import Field

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from budgetplanner.api.deps import ApiSettings, check_admin_key, load_settings
from budgetplanner.exceptions import (
    AuthorizationError,
    BudgetPlannerError,
    CatalogError,
    NotFoundError,
    QuoteValidationError,
    ShortLinkConflictError,
    VersionConflictError,
)
from budgetplanner.models.base import WireModel
from budgetplanner.models.enums import PropertyType
from budgetplanner.models.selection import SelectionState  # noqa: TCH001 (FastAPI resolves at runtime)
from budgetplanner.services.budgets import Viewer
from budgetplanner.services.proposal import build_proposal, render_proposal_email
from budgetplanner.versioning import SHARED_NOTE

if TYPE_CHECKING:
    from budgetplanner.engine import QuoteEngine
    from budgetplanner.models.budget import Budget, ShortLink
    from budgetplanner.services.budgets import BudgetService
    from budgetplanner.services.links import ShortLinkService

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


# ----------------------------------------------------------------------
# Request bodies
# ----------------------------------------------------------------------


class CreateBudgetRequest(WireModel):
    state: dict[str, Any]
    client_name: str | None = None
    builder: str | None = None


class UpdateBudgetRequest(WireModel):
    state: dict[str, Any]
    note: str | None = None
    pin: bool = False


class ProposalRequest(WireModel):
    recipient_name: str | None = None
    subject: str | None = None


class ShortenRequest(WireModel):
    config: str
    client_name: str | None = None
    custom_code: str | None = None


class CustomizeRequest(WireModel):
    categories: list[dict[str, Any]] = Field(min_length=1)
    home_size: int = Field(gt=0)
    property_type: PropertyType


class CatalogDefaultsRequest(WireModel):
    categories: list[dict[str, Any]] = Field(min_length=1)
    extras: list[dict[str, Any]] = Field(default_factory=list)


def _status_for(exc: BudgetPlannerError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthorizationError):
        return 403
    if isinstance(exc, (ShortLinkConflictError, VersionConflictError)):
        return 409
    if isinstance(exc, (QuoteValidationError, CatalogError)):
        return 422
    return 500


def _budget_payload(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "clientName": budget.client_name,
        "builder": budget.builder,
        "created": budget.created.isoformat(),
        "lastModified": budget.last_modified.isoformat(),
        "currentState": budget.current_state,
        "versionCount": len(budget.versions),
        "isCustomized": budget.is_customized,
    }


def _link_payload(link: ShortLink) -> dict[str, Any]:
    return {**link.to_wire(), "shortUrl": f"/s/{link.code}"}


def create_app(
    *,
    service: BudgetService | None = None,
    links: ShortLinkService | None = None,
    engine: QuoteEngine | None = None,
    admin_key: str | None = None,
    settings: ApiSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    service
        Optional pre-built budget service (e.g. tests). If not provided, one
        is created over an in-memory store on first use.
    links
        Optional pre-built short link service.
    engine
        Optional quote engine for /api/quote and /api/catalog. Defaults to
        the budget service's engine.
    admin_key
        Secret expected in the ``X-Admin-Key`` header of admin endpoints.
        Overrides ``BUDGETPLANNER_ADMIN_KEY``.
    settings
        Optional settings; read from the environment when omitted.
    """
    settings = settings or load_settings()
    app = FastAPI(title="Budget Planner", version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject mocks
    app.state.service = service
    app.state.links = links
    app.state.engine = engine
    app.state.admin_key = admin_key if admin_key is not None else settings.admin_key

    def _get_service() -> BudgetService:
        svc: BudgetService | None = app.state.service
        if svc is not None:
            return svc
        from budgetplanner.factory import create_default_service

        svc = create_default_service(engine=app.state.engine)
        app.state.service = svc
        return svc

    def _get_links() -> ShortLinkService:
        ls: ShortLinkService | None = app.state.links
        if ls is not None:
            return ls
        from budgetplanner.factory import create_default_links

        ls = create_default_links()
        app.state.links = ls
        return ls

    def _get_engine() -> QuoteEngine:
        eng: QuoteEngine | None = app.state.engine
        if eng is not None:
            return eng
        eng = _get_service().engine
        app.state.engine = eng
        return eng

    def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
        check_admin_key(x_admin_key, app.state.admin_key)

    @app.exception_handler(BudgetPlannerError)
    async def handle_domain_error(
        request: Request, exc: BudgetPlannerError
    ) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": API_VERSION}

    # ------------------------------------------------------------------
    # Catalog and quotes
    # ------------------------------------------------------------------

    @app.get("/api/catalog/{property_type}")
    def get_catalog(property_type: str) -> dict[str, Any]:
        try:
            catalog = _get_engine().catalog_for(property_type)
        except CatalogError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return catalog.to_wire()

    @app.post("/api/quote")
    def quote(state: SelectionState) -> dict[str, Any]:
        result = _get_engine().quote(state)
        return {"quote": result.to_wire(), "summary": result.to_summary_dict()}

    # ------------------------------------------------------------------
    # Live budgets
    # ------------------------------------------------------------------

    @app.post("/api/budgets")
    def create_budget(body: CreateBudgetRequest) -> dict[str, Any]:
        budget = _get_service().create(
            body.state, client_name=body.client_name, builder=body.builder
        )
        return {"id": budget.id, "url": f"/b/{budget.id}", **_budget_payload(budget)}

    @app.get("/api/budgets/{budget_id}")
    def get_budget(
        budget_id: str, request: Request, admin: bool = False
    ) -> dict[str, Any]:
        viewer = None
        if not admin:
            viewer = Viewer(
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
            )
        budget = _get_service().get(budget_id, viewer=viewer)
        return _budget_payload(budget)

    @app.put("/api/budgets/{budget_id}")
    def update_budget(budget_id: str, body: UpdateBudgetRequest) -> dict[str, Any]:
        result = _get_service().update(
            budget_id, body.state, note=body.note, pin=body.pin
        )
        return result.to_wire()

    @app.post("/api/budgets/{budget_id}/proposal")
    def budget_proposal(budget_id: str, body: ProposalRequest) -> dict[str, Any]:
        svc = _get_service()
        budget = svc.get(budget_id)
        proposal = build_proposal(
            svc.quote_for(budget),
            recipient_name=body.recipient_name or budget.client_name,
            subject=body.subject,
        )
        html = render_proposal_email(proposal)
        result = svc.pin_current(budget_id, note=SHARED_NOTE)
        return {
            "subject": proposal.subject,
            "html": html,
            "versionNumber": result.version_number,
        }

    # ------------------------------------------------------------------
    # Short links
    # ------------------------------------------------------------------

    @app.post("/api/shorten")
    def shorten(body: ShortenRequest) -> dict[str, Any]:
        link = _get_links().shorten(
            body.config, client_name=body.client_name, custom_code=body.custom_code
        )
        return {"code": link.code, "shortUrl": f"/s/{link.code}"}

    @app.get("/s/{code}")
    def follow_short_link(code: str) -> RedirectResponse:
        link = _get_links().resolve(code)
        return RedirectResponse(url=f"/?{link.config}", status_code=302)

    # ------------------------------------------------------------------
    # Admin (X-Admin-Key)
    # ------------------------------------------------------------------

    @app.get("/api/admin/budgets", dependencies=[Depends(require_admin)])
    def admin_list_budgets() -> list[dict[str, Any]]:
        return [s.to_wire() for s in _get_service().list_summaries()]

    @app.get("/api/admin/budgets/{budget_id}", dependencies=[Depends(require_admin)])
    def admin_get_budget(budget_id: str) -> dict[str, Any]:
        budget = _get_service().get(budget_id)
        return {
            **budget.to_wire(),
            "viewCount": budget.view_count,
            "lastViewed": (
                budget.last_viewed.isoformat() if budget.last_viewed else None
            ),
        }

    @app.post(
        "/api/admin/budgets/{budget_id}/restore/{version_number}",
        dependencies=[Depends(require_admin)],
    )
    def admin_restore(budget_id: str, version_number: int) -> dict[str, Any]:
        return _get_service().restore(budget_id, version_number).to_wire()

    @app.post(
        "/api/admin/budgets/{budget_id}/customize",
        dependencies=[Depends(require_admin)],
    )
    def admin_customize(budget_id: str, body: CustomizeRequest) -> dict[str, Any]:
        budget = _get_service().customize(
            budget_id,
            body.categories,
            home_size=body.home_size,
            property_type=body.property_type,
            admin=True,
        )
        return _budget_payload(budget)

    @app.put(
        "/api/admin/catalog/{property_type}", dependencies=[Depends(require_admin)]
    )
    def admin_set_catalog(
        property_type: str, body: CatalogDefaultsRequest
    ) -> dict[str, Any]:
        catalog = _get_engine().repository.set_defaults(
            property_type, body.categories, body.extras
        )
        return catalog.to_wire()

    @app.delete("/api/admin/budgets/{budget_id}", dependencies=[Depends(require_admin)])
    def admin_delete(budget_id: str) -> dict[str, bool]:
        _get_service().delete(budget_id)
        return {"success": True}

    @app.get("/api/links", dependencies=[Depends(require_admin)])
    def list_links() -> list[dict[str, Any]]:
        return [_link_payload(link) for link in _get_links().list()]

    return app

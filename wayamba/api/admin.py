"""Admin API endpoints: login/logout, feedback moderation and exports."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from litestar import Controller, Request, Response, get, post
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from wayamba.api.deps import DbSession
from wayamba.auth import SESSION_COOKIE, AdminSessions, authenticate, require_admin_guard
from wayamba.errors import ServiceUnavailable
from wayamba.models import FeedbackStatus
from wayamba.services import FeedbackService, feedback_to_csv, feedback_to_pdf
from wayamba.utils.logging import error_log

logger = logging.getLogger("Wayamba.admin")


# --- Request/Response Schemas ---

class LoginRequest(BaseModel):
    """Admin credentials."""
    username: str
    password: str


class StatusUpdateRequest(BaseModel):
    """New review status for a feedback item."""
    status: str


class FeedbackListItem(BaseModel):
    """Feedback list item."""
    id: uuid.UUID
    name: str
    comment: str
    latitude: float
    longitude: float
    image_url: Optional[str]
    status: FeedbackStatus
    created_at: datetime

    class Config:
        from_attributes = True


class SuccessResponse(BaseModel):
    success: bool
    message: str


# --- Controllers ---

class AdminAuthController(Controller):
    """Admin login and logout. Not guarded."""

    path = "/admin"
    tags = ["admin"]

    @post("/login", status_code=HTTP_200_OK)
    async def login(
        self,
        data: LoginRequest,
        session: DbSession,
        admin_sessions: AdminSessions,
        request: Request,
    ) -> Response[dict]:
        """Check credentials and start an authenticated session."""
        user = await authenticate(session, data.username, data.password)
        session_id = await admin_sessions.create(user.username)

        response = Response({"success": True, "message": "Logged in"})
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            max_age=admin_sessions.ttl,
            httponly=True,
            secure=request.app.state.settings.session_cookie_secure,
            samesite="lax",
            path="/",
        )
        return response

    @post("/logout", status_code=HTTP_200_OK)
    async def logout(
        self,
        request: Request,
        admin_sessions: AdminSessions,
    ) -> Response[dict]:
        """End the session, whatever state it is in."""
        session_id = request.cookies.get(SESSION_COOKIE)
        await admin_sessions.destroy(session_id)
        if session_id:
            logger.info(f"Admin logged out: session_id {session_id[:8]}...")

        response = Response({"success": True, "message": "Logged out successfully"})
        response.delete_cookie(SESSION_COOKIE, path="/")
        return response


class AdminController(Controller):
    """Feedback moderation. Every route requires an admin session."""

    path = "/admin"
    tags = ["admin"]
    guards = [require_admin_guard]

    @get("/feedback")
    async def get_feedback(self, feedback_service: FeedbackService) -> List[FeedbackListItem]:
        """Get all feedback submissions, newest first."""
        try:
            feedback_list = await feedback_service.list_all()
        except SQLAlchemyError as e:
            error_log("Database error fetching feedback", exc=e)
            raise ServiceUnavailable("Failed to fetch feedback")
        return [FeedbackListItem.model_validate(f) for f in feedback_list]

    @post("/feedback/{feedback_id:str}/status", status_code=HTTP_200_OK)
    async def update_status(
        self,
        feedback_id: str,
        data: StatusUpdateRequest,
        feedback_service: FeedbackService,
    ) -> SuccessResponse:
        """Set a feedback item to pending, approved or rejected."""
        await feedback_service.set_status(feedback_id, data.status)
        return SuccessResponse(success=True, message="Feedback status updated")

    @get("/export/csv")
    async def export_csv(self, feedback_service: FeedbackService) -> Response[str]:
        """Download all feedback as CSV."""
        try:
            feedback_list = await feedback_service.list_all()
        except SQLAlchemyError as e:
            error_log("Database error during CSV export", exc=e)
            raise ServiceUnavailable("Export failed")

        return Response(
            feedback_to_csv(feedback_list),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="feedback.csv"'},
        )

    @get("/export/pdf")
    async def export_pdf(self, feedback_service: FeedbackService) -> Response[bytes]:
        """Download all feedback as a PDF report."""
        try:
            feedback_list = await feedback_service.list_all()
        except SQLAlchemyError as e:
            error_log("Database error during PDF export", exc=e)
            raise ServiceUnavailable("Export failed")

        return Response(
            feedback_to_pdf(feedback_list),
            media_type="application/pdf",
            headers={"Content-Disposition": 'attachment; filename="feedback.pdf"'},
        )

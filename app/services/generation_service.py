import logging
from typing import Any

from sqlalchemy.orm import Session

from app.db.models.user import User
from app.schemas.script import GenerateScriptRequest
from app.schemas.script_content import content_kind
from app.services.llm_service import generate_calendar, generate_script
from app.services.script_service import fields_from_body, save_new_script

logger = logging.getLogger(__name__)


def calendar_title(days: int, topic: str) -> str:
    return f"{days}-Day Content Calendar: {topic}"


def run_script_generation(db: Session, user: User, request: GenerateScriptRequest) -> dict[str, Any]:
    """
    Generate a script or calendar and optionally persist it.

    Calendar failures raise InvalidCalendarError before anything is saved.
    """
    days = request.calendarDays
    if days > 0:
        content = generate_calendar(request, days, target_audience=request.targetAudience)
        title = calendar_title(days, request.topic)
    else:
        result = generate_script(request, target_audience=request.targetAudience)
        title, content = result["title"], result["content"]

    script_id = None
    if request.save:
        fields = fields_from_body(request, exclude={"targetAudience", "save"})
        fields.update(title=title, content=content)
        script_id = save_new_script(db, user, fields).id

    return {
        "id": script_id,
        "title": title,
        "kind": content_kind(content, days),
        "content": content,
    }

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_template_or_404
from app.models.schedule_template import ScheduleTemplate
from app.schemas.template import ScheduleTemplateCreate, ScheduleTemplateOut, ScheduleTemplateUpdate
from app.services import templates as template_service

router = APIRouter()


@router.get("/", response_model=list[ScheduleTemplateOut])
def list_templates(db: Session = Depends(get_db)) -> list[ScheduleTemplateOut]:
    return template_service.list_templates(db)


@router.post("/", response_model=ScheduleTemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(payload: ScheduleTemplateCreate, db: Session = Depends(get_db)) -> ScheduleTemplateOut:
    return template_service.create_template(db, payload)


@router.get("/{template_id}", response_model=ScheduleTemplateOut)
def get_template(template: ScheduleTemplate = Depends(get_template_or_404)) -> ScheduleTemplateOut:
    return template


@router.put("/{template_id}", response_model=ScheduleTemplateOut)
def update_template(
    payload: ScheduleTemplateUpdate,
    template: ScheduleTemplate = Depends(get_template_or_404),
    db: Session = Depends(get_db),
) -> ScheduleTemplateOut:
    return template_service.update_template(db, template, payload)


@router.delete("/{template_id}")
def delete_template(
    template: ScheduleTemplate = Depends(get_template_or_404),
    db: Session = Depends(get_db),
) -> dict:
    template_service.delete_template(db, template)
    return {"success": True}

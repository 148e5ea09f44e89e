from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nexsched.database import get_db
from nexsched.repositories.appointment_repository import AppointmentRepository
from nexsched.repositories.catalog_repository import CatalogRepository
from nexsched.routes.dependencies import database_unavailable
from nexsched.services.report_service import ReportData, build_report

router = APIRouter(tags=['reports'])


@router.get('/summary', response_model=ReportData)
def read_report_summary(db: Session = Depends(get_db)):
    try:
        return build_report(
            AppointmentRepository.list_all(db),
            CatalogRepository.list_services(db),
        )
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

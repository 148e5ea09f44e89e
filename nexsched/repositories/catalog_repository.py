"""Catalog repository - read access to services and dentists"""

from typing import Optional

from sqlalchemy.orm import Session

from nexsched.core.errors import NotFoundError
from nexsched.models.dentist import Dentist
from nexsched.models.service import Service

DEFAULT_SERVICES = [
    {'id': 'service-1', 'name': 'Routine Checkup', 'duration_minutes': 45},
    {'id': 'service-2', 'name': 'Teeth Cleaning', 'duration_minutes': 60},
    {'id': 'service-3', 'name': 'Filling', 'duration_minutes': 60},
    {'id': 'service-4', 'name': 'Extraction', 'duration_minutes': 90},
    {'id': 'service-5', 'name': 'Orthodontic Consultation', 'duration_minutes': 30},
]

DEFAULT_DENTISTS = [
    {'id': 'dentist-1', 'name': 'Dr. Evelyn Reed', 'specialty': 'General Dentistry', 'color': '#3182CE'},
    {'id': 'dentist-2', 'name': 'Dr. Marcus Chen', 'specialty': 'Orthodontics', 'color': '#38A169'},
    {'id': 'dentist-3', 'name': 'Dr. Sofia Garcia', 'specialty': 'Periodontics', 'color': '#805AD5'},
]


class CatalogRepository:
    """Repository for service and dentist reference data"""

    @staticmethod
    def find_service(db: Session, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def find_dentist(db: Session, dentist_id: str) -> Optional[Dentist]:
        return db.query(Dentist).filter(Dentist.id == dentist_id).first()

    @classmethod
    def get_service(cls, db: Session, service_id: str) -> Service:
        service = cls.find_service(db, service_id)
        if service is None:
            raise NotFoundError(f"Service '{service_id}' not found.")
        return service

    @classmethod
    def get_dentist(cls, db: Session, dentist_id: str) -> Dentist:
        dentist = cls.find_dentist(db, dentist_id)
        if dentist is None:
            raise NotFoundError(f"Dentist '{dentist_id}' not found.")
        return dentist

    @staticmethod
    def list_services(db: Session) -> list[Service]:
        return db.query(Service).order_by(Service.id.asc()).all()

    @staticmethod
    def list_dentists(db: Session) -> list[Dentist]:
        return db.query(Dentist).order_by(Dentist.id.asc()).all()

    @staticmethod
    def seed_defaults(db: Session) -> int:
        """Insert the default catalog rows that are missing. Returns how many were added."""
        added = 0
        for data in DEFAULT_SERVICES:
            if db.get(Service, data['id']) is None:
                db.add(Service(**data))
                added += 1
        for data in DEFAULT_DENTISTS:
            if db.get(Dentist, data['id']) is None:
                db.add(Dentist(**data))
                added += 1
        db.commit()
        return added

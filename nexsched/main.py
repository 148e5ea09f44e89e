import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from nexsched.core import config
from nexsched.core.clinic import load_clinic_settings
from nexsched.database import Base, SessionLocal, engine
from nexsched.models import appointment, dentist, service  # noqa: F401
from nexsched.repositories.catalog_repository import CatalogRepository
from nexsched.routes import appointment_routes, availability_routes, catalog_routes, report_routes
from nexsched.services.appointment_service import BookingLocks

app = FastAPI()
app.state.booking_locks = BookingLocks()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def configure_scheduler() -> None:
    config.validate_runtime_config()
    app.state.clinic_settings = load_clinic_settings()


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        if config.SEED_REFERENCE_DATA:
            db = SessionLocal()
            try:
                added = CatalogRepository.seed_defaults(db)
            finally:
                db.close()
            if added:
                logger.info('Seeded %d catalog rows', added)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Clinic Scheduler API Running'}


app.include_router(catalog_routes.clinic_router, prefix='/clinic')
app.include_router(catalog_routes.router, prefix='/catalog')
app.include_router(availability_routes.router, prefix='/availability')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(report_routes.router, prefix='/reports')

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.exception_handlers import record_route_methods, register_exception_handlers
from backend.core.responses import api_response
from backend.database import Base, engine, ensure_practitioner_schema
from backend.models import booking, practitioner, slot, user  # noqa: F401
from backend.routes import account_routes, auth_routes, booking_routes, practitioner_routes, slot_routes

app = FastAPI(title='Clinic Booking API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
    allow_headers=['Content-Type', 'Authorization'],
)

register_exception_handlers(app)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_practitioner_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return api_response({'status': 'Clinic Booking API Running'}, 200, 'OK')


def include(router, prefix: str) -> None:
    app.include_router(router, prefix=prefix)
    record_route_methods(app, router, prefix)


include(auth_routes.router, '/auth')
include(account_routes.router, '/accounts')
include(practitioner_routes.router, '/practitioners')
include(slot_routes.router, '/slots')
include(booking_routes.router, '/bookings')

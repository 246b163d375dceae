import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from eventsphere.auth.session_handler import SessionManager
from eventsphere.core import config
from eventsphere.core.errors import EventSphereError, StoreUnavailableError, kind_for_status
from eventsphere.routes import (
    analytics_routes,
    auth_routes,
    event_routes,
    notification_routes,
    registration_routes,
    user_routes,
)
from eventsphere.seed import seed_sample_data
from eventsphere.services.registration import EventLockRegistry
from eventsphere.storage import Storage

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get('msg')))
    return '; '.join(messages) or 'Invalid request.'


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EventSphereError)
    async def handle_domain_error(request: Request, exc: EventSphereError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={'message': _format_validation_errors(exc), 'kind': 'validation'},
        )

    @app.exception_handler(HTTPException)
    async def handle_http_error(request: Request, exc: HTTPException):
        message = exc.detail if isinstance(exc.detail, str) else 'Request failed.'
        return JSONResponse(
            status_code=exc.status_code,
            content={'message': message, 'kind': kind_for_status(exc.status_code)},
            headers=getattr(exc, 'headers', None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.exception('Data store failure on %s %s', request.method, request.url.path)
        error = StoreUnavailableError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        return JSONResponse(status_code=500, content={'message': 'Internal server error', 'kind': 'internal'})


def create_app(database_url: str | None = None, seed: bool | None = None) -> FastAPI:
    config.validate_runtime_config()

    storage = Storage(database_url)
    storage.init()
    if config.SEED_SAMPLE_DATA if seed is None else seed:
        seed_sample_data(storage)

    app = FastAPI(title='EventSphere API')
    app.state.storage = storage
    app.state.session_manager = SessionManager(storage)
    app.state.event_locks = EventLockRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    install_exception_handlers(app)

    @app.get('/')
    def root():
        return {'status': 'EventSphere API Running'}

    app.include_router(auth_routes.router, prefix='/api/auth')
    app.include_router(user_routes.router, prefix='/api/users')
    app.include_router(event_routes.router, prefix='/api/events')
    app.include_router(registration_routes.router, prefix='/api/registrations')
    app.include_router(notification_routes.router, prefix='/api/notifications')
    app.include_router(analytics_routes.router, prefix='/api/analytics')

    return app


configure_logging()
app = create_app()


if __name__ == '__main__':
    uvicorn.run('eventsphere.main:app', host=config.HOST, port=config.PORT)

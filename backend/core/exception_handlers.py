"""Exception handlers that render every failure in the response envelope."""

import logging

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import compile_path

from backend.core.errors import ClinicError, ConfigurationError
from backend.core.responses import api_response

logger = logging.getLogger(__name__)

METHOD_ORDER = ['GET', 'POST', 'PUT', 'DELETE']


def record_route_methods(app: FastAPI, router: APIRouter, prefix: str = '') -> None:
    """Remember the methods each path of an included router accepts.

    Included routers are not always flattened into ``app.router.routes``, so
    the table is built from the routers themselves when they are mounted.
    """
    if not hasattr(app.state, 'route_methods'):
        app.state.route_methods = []

    for route in router.routes:
        if isinstance(route, APIRoute):
            path_regex, _, _ = compile_path(prefix + route.path)
            app.state.route_methods.append((path_regex, set(route.methods)))


def allowed_methods(request: Request) -> list[str]:
    """Collect the methods of every route whose path matches the request."""
    path = request.scope['path']
    methods: set[str] = set()
    for route in request.app.router.routes:
        if isinstance(route, APIRoute) and route.path_regex.match(path):
            methods.update(route.methods)
    for path_regex, route_methods in getattr(request.app.state, 'route_methods', []):
        if path_regex.match(path):
            methods.update(route_methods)

    ordered = [method for method in METHOD_ORDER if method in methods]
    return ordered + sorted(methods - set(METHOD_ORDER))


async def clinic_error_handler(request: Request, exc: ClinicError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error('Configuration error on %s %s: %s', request.method, request.url.path, exc.message)
        return api_response(None, exc.status_code, ConfigurationError.default_message)

    return api_response(exc.result, exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = dict(exc.headers or {})

    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        headers['Allow'] = ', '.join(allowed_methods(request))
        return api_response(None, exc.status_code, f'Method {request.method} Not Allowed', headers=headers)

    return api_response(None, exc.status_code, str(exc.detail), headers=headers or None)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            'field': '.'.join(str(loc) for loc in error['loc'] if loc != 'body'),
            'message': error['msg'],
        }
        for error in exc.errors()
    ]
    logger.warning('Validation error on %s: %s', request.url.path, errors)

    first = errors[0] if errors else {'field': '', 'message': 'Invalid request.'}
    message = f"{first['field']}: {first['message']}" if first['field'] else first['message']
    return api_response({'errors': errors}, status.HTTP_400_BAD_REQUEST, message)


async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Unhandled database error on %s %s', request.method, request.url.path)
    return api_response(
        {'error_details': str(exc)},
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'A database error occurred.',
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, clinic_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)

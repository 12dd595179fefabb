import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from pizzeria.config import settings
from pizzeria.database import create_db_and_tables
from pizzeria.exceptions import PizzeriaException
from pizzeria.routes import (
    addresses,
    auth,
    cart,
    contact,
    health,
    orders,
    pizzas,
    users,
)
from pizzeria.utils.logging import configure_logging
from pizzeria.utils.responses import failure

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Pizzeria API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PizzeriaException)
async def pizzeria_exception_handler(request: Request, exc: PizzeriaException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content=failure(exc.message))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Validation Error")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=400,
        content=failure(message, errors=[e.get("msg") for e in errors]),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=failure("Server Error"))


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(pizzas.router, prefix="/pizzas", tags=["Pizzas"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(addresses.router, prefix="/addresses", tags=["Addresses"])
app.include_router(contact.router, prefix="/contact", tags=["Contact"])


@app.get("/")
def root():
    return {
        "auth": ["/auth/register", "/auth/verify-otp", "/auth/login"],
        "pizza_endpoints": [
            "/pizzas", "/pizzas/featured", "/pizzas/search",
            "/pizzas/category/{category}", "/pizzas/categories/stats", "/pizzas/{id}"
        ],
        "cart": [
            "/cart", "/cart/add", "/cart/update/{item_id}",
            "/cart/remove/{item_id}", "/cart/clear", "/cart/discount"
        ],
        "orders": [
            "/orders", "/orders/create", "/orders/create-cod", "/orders/{id}",
            "/orders/{id}/cancel", "/orders/{id}/review"
        ],
        "admin_orders": [
            "/orders/cod-orders", "/orders/{id}/status", "/orders/{id}/cod-payment"
        ],
        "addresses": [
            "/addresses", "/addresses/{id}", "/addresses/{id}/default",
            "/addresses/districts/{province}"
        ],
        "contact": [
            "/contact", "/contact/my-submissions", "/contact/admin/all",
            "/contact/admin/{id}", "/contact/{id}"
        ],
    }

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL, UPLOAD_DIR
from database.init import Base, SessionLocal, engine
import database.models  # noqa: F401  registers the tables
from init_data import create_initial_data
from routes import (
    auth_routes,
    user_routes,
    tenant_routes,
    guest_routes,
    room_routes,
    reservation_routes,
)
from responses.error import bad_request_error, error_response, internal_server_error
from utils.exceptions import AppError

# Set up logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

with SessionLocal() as session:
    create_initial_data(session)

app = FastAPI(title="Cliente API")

uploads_dir = os.path.join(os.getcwd(), UPLOAD_DIR)
os.makedirs(uploads_dir, exist_ok=True)

app.mount(f"/{UPLOAD_DIR}", StaticFiles(directory=uploads_dir), name=UPLOAD_DIR)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return bad_request_error("; ".join(messages) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_server_error("Internal server error")


app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(tenant_routes.router)
app.include_router(guest_routes.router)
app.include_router(room_routes.router)
app.include_router(reservation_routes.router)


@app.get("/")
def read_root():
    return {"name": "Cliente API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)

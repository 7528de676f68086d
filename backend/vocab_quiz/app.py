# backend/vocab_quiz/app.py

import hmac, logging, time
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings
from .core.errors import QuizGenerationError
from .core.quiz_generator import QuizGenerator
from .core.schemas import (
    GenerateRequest,
    GenerateResponse,
    LoginRequest,
    QuizResponse,
    ResultsResponse,
    SubmitRequest,
    SubmitResponse,
)
from .core.session_store import AnswerCountMismatch, NoQuizLoaded, QuizSessionStore

logger = logging.getLogger("vocab_quiz")

SESSION_COOKIE_NAME = "quiz.session.id"
SESSION_MAX_AGE = 24 * 60 * 60
ADMIN_FLAG = "is_admin"
# request bodies on these paths carry credentials
UNLOGGED_BODY_PATHS = {"/api/admin/login"}

ENDPOINTS = {
    "health": "/api/health",
    "admin_login": "/api/admin/login",
    "admin_quiz": "/api/admin/quiz",
    "admin_results": "/api/admin/results",
    "quiz": "/api/quiz",
    "quiz_submit": "/api/quiz/submit",
}


# ------------------------------------------------------------
# Middleware
# ------------------------------------------------------------
class LogRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "-"
        logger.info(f"{request.method} {request.url.path} - IP: {client_ip}")
        if request.url.path not in UNLOGGED_BODY_PATHS:
            try:
                body = await request.body()
                if body:
                    logger.debug(f"Body: {body.decode('utf-8')}")
            except Exception:
                logger.warning("Could not read request body")
        return await call_next(request)


# ------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> QuizSessionStore:
    return request.app.state.store


def get_generator(request: Request) -> QuizGenerator:
    return request.app.state.generator


def require_admin(request: Request) -> None:
    if request.session.get(ADMIN_FLAG):
        return
    logger.warning(f"Admin access denied for {request.url.path}")
    raise HTTPException(status_code=403, detail="Forbidden - Admin access required")


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _same_secret(given: Optional[str], expected: Optional[str]) -> bool:
    if given is None or expected is None:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        logger.info(f"Route not found: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "path": request.url.path,
                "method": request.method,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request body", "detail": exc.errors()},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.app_env == "development" else "Something went wrong",
        },
    )


# ------------------------------------------------------------
# Routes
# ------------------------------------------------------------
router = APIRouter()


@router.get("/")
def root(settings: Settings = Depends(get_settings)):
    return {
        "message": "English Quiz Backend API",
        "status": "Running",
        "timestamp": _now(),
        "environment": settings.app_env,
        "endpoints": ENDPOINTS,
    }


@router.get("/api/health")
def health(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: QuizSessionStore = Depends(get_store),
):
    quiz = store.quiz
    return {
        "status": "OK",
        "timestamp": _now(),
        "environment": settings.app_env,
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "quiz_available": quiz is not None,
        "quiz_count": len(quiz) if quiz else 0,
        "results_count": store.results_count,
    }


@router.post("/api/admin/login")
def admin_login(
    request: Request,
    req: Optional[LoginRequest] = None,
    settings: Settings = Depends(get_settings),
):
    if not settings.admin_configured:
        logger.error("Admin credentials not configured in environment")
        return _error(500, "Server configuration error: Admin credentials not set")

    req = req or LoginRequest()
    if _same_secret(req.username, settings.admin_username) and _same_secret(
        req.password, settings.admin_password
    ):
        request.session[ADMIN_FLAG] = True
        logger.info("Admin login successful")
        return {"success": True}

    logger.warning("Admin login rejected: invalid credentials")
    return _error(401, "Invalid credentials")


@router.post(
    "/api/admin/quiz",
    response_model=GenerateResponse,
    dependencies=[Depends(require_admin)],
)
async def generate_quiz(
    req: Optional[GenerateRequest] = None,
    store: QuizSessionStore = Depends(get_store),
    generator: QuizGenerator = Depends(get_generator),
):
    text = req.text if req else None
    if not text:
        return _error(400, "Text is required")

    logger.info(f"Quiz generation requested, text length {len(text)} characters")
    try:
        quiz = await generator.generate(text)
    except QuizGenerationError as e:
        logger.error(f"Quiz generation failed ({type(e).__name__}): {e.message}")
        return _error(e.status_code, e.message)

    # the store lock is a threading.Lock, keep it off the event loop
    await run_in_threadpool(store.replace_quiz, quiz)
    return GenerateResponse(message="Quiz generated successfully", questionsCount=len(quiz))


@router.get("/api/quiz", response_model=QuizResponse)
def get_quiz(store: QuizSessionStore = Depends(get_store)):
    quiz = store.quiz or []
    logger.debug(f"Quiz requested - available: {store.has_quiz}, length: {len(quiz)}")
    return QuizResponse(quiz=quiz, available=store.has_quiz, count=len(quiz))


@router.post("/api/quiz/submit", response_model=SubmitResponse)
def submit_quiz(
    req: Optional[SubmitRequest] = None,
    store: QuizSessionStore = Depends(get_store),
):
    if not req or not req.name or not req.surname or req.answers is None:
        return _error(400, "Name, surname, and answers required")

    try:
        result = store.submit(req.name, req.surname, req.answers)
    except (NoQuizLoaded, AnswerCountMismatch) as e:
        logger.warning(f"Submission rejected: {e}")
        return _error(400, str(e))

    return SubmitResponse(**result.model_dump(), message="Quiz submitted successfully")


@router.get(
    "/api/admin/results",
    response_model=ResultsResponse,
    dependencies=[Depends(require_admin)],
)
def get_results(store: QuizSessionStore = Depends(get_store)):
    results = store.results()
    logger.info(f"Results requested - count: {len(results)}")
    return ResultsResponse(results=results, count=len(results), quiz_available=store.has_quiz)


# ------------------------------------------------------------
# App factory
# ------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[QuizSessionStore] = None,
    generator: Optional[QuizGenerator] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Vocabulary Quiz API")
    app.state.settings = settings
    app.state.store = store or QuizSessionStore()
    app.state.generator = generator or QuizGenerator.from_settings(settings)
    app.state.started_at = time.monotonic()

    # last added runs first: CORS -> sessions -> request log
    app.add_middleware(LogRequestMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=SESSION_MAX_AGE,
        same_site="none" if settings.is_production else "lax",
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    app.include_router(router)

    logger.info(f"Startup configuration: {settings.describe()}")
    return app


app = create_app()


def main() -> None:
    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

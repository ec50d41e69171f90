from typing import Any, cast
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardex.core.config import settings
from cardex.core.errors import register_exception_handlers
from cardex.core.logging_config import get_logger
from cardex.api import auth, cards, users
from cardex.middleware.context import RequestContextMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Cardex API starting", project=settings.PROJECT_NAME)
    if not settings.SECRET_KEY:
        logger.warning("SECRET_KEY is not set; session tokens are signed with an empty key")
    yield
    logger.info("Cardex API stopped")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

origins = [
    "http://localhost:5173",  # Vite default
    "http://localhost:3000",  # React default
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
    settings.FRONTEND_URL,
]

# Clean up duplicates and empty strings
origins = list(set([o for o in origins if o]))

app.add_middleware(cast(Any, RequestContextMiddleware))

app.add_middleware(
    cast(Any, CORSMiddleware),
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

register_exception_handlers(app)

app.include_router(cards.router, prefix="/cartes", tags=["cards"])
app.include_router(auth.router, tags=["auth"])
app.include_router(users.router, prefix="/utilisateurs", tags=["users"])


@app.get("/")
def root():
    return {"message": "Welcome to the Cardex API"}


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "healthy"}

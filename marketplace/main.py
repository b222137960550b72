import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from marketplace.api.auth import router as auth_router
from marketplace.api.listings import router as listings_router
from marketplace.api.listings import users_router
from marketplace.api.navigation import router as navigation_router
from marketplace.api.profiles import router as profiles_router
from marketplace.config import ALLOWED_ORIGINS, STORAGE_BUCKET, SUPABASE_URL
from marketplace.database import connection
from marketplace.middleware.rate_limit import custom_rate_limit_handler, limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    connection._http_client = connection.create_http_client()
    logger.info(f"Marketplace front end starting against {SUPABASE_URL} (bucket: {STORAGE_BUCKET})")

    yield  # App runs

    # Shutdown
    if connection._http_client:
        await connection._http_client.aclose()
        connection._http_client = None
    logger.info("Marketplace front end stopped, HTTP client closed")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)

app.include_router(auth_router, prefix="/api")
app.include_router(navigation_router, prefix="/api")
app.include_router(profiles_router, prefix="/api")
app.include_router(listings_router, prefix="/api")
app.include_router(users_router, prefix="/api")


@app.get("/api/health")
@limiter.limit("100/minute")
async def health(request: Request):
    logger.info("Health check endpoint accessed")
    return {"message": "Marketplace front end is running"}


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()

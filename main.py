from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# HTTP library debug logs off
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ database + models (imported so create_all sees every table)
from database.db import Base, engine
from models import attendance as _attendance, classes as _classes, fees as _fees  # noqa: F401
from models import grades as _grades, pupils as _pupils, receipts as _receipts     # noqa: F401

# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import attendance, class_configs, fees, grades, pupils, reports


# ✅ tables are created once when the app starts
@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s)", engine.url.get_backend_name())
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (front-end origins come from settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency (X-Latency-Ms response header)
app.add_middleware(TimingMiddleware)

# ✅ global error handler (consistent JSON error body)
add_error_handlers(app)

# ✅ /v1 prefixed routers
app.include_router(pupils.router,         prefix="/v1")
app.include_router(grades.router,         prefix="/v1")
app.include_router(class_configs.router,  prefix="/v1")
app.include_router(reports.router,        prefix="/v1")
app.include_router(fees.router,           prefix="/v1")
app.include_router(attendance.router,     prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - {settings.APP_DESCRIPTION}"}

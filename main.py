import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskberry.config.settings import settings
from taskberry.routers import auth, user, task, hierarchy, report

logging.basicConfig(
    level=settings.SERVER['log_level'],
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Taskberry API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(task.router, tags=["Tasks"])
app.include_router(hierarchy.router, prefix="/hierarchy", tags=["Hierarchy"])
app.include_router(report.router, tags=["Reports"])

logger.info("Taskberry API configured")


# Root route
@app.get("/")
def read_root():
    return {"message": "Taskberry API"}


@app.get("/health")
def health():
    return {"status": "ok"}

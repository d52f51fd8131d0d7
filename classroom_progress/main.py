import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from classroom_progress.clients.classroom import GoogleAPIError
from classroom_progress.core.config import HOST, PORT
from classroom_progress.core.logging_middleware import LoggingMiddleware

from classroom_progress.routers.auth import router as auth_router
from classroom_progress.routers.courses import router as courses_router
from classroom_progress.routers.dashboard import router as dashboard_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Classroom Progress")

# Middleware
app.add_middleware(LoggingMiddleware)


# Upstream failures keep Google's status so the dashboard can show it
@app.exception_handler(GoogleAPIError)
async def google_api_error_handler(request: Request, exc: GoogleAPIError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])

# Dashboard routes carry their full paths
app.include_router(dashboard_router)


def run():
    uvicorn.run(app, host=HOST, port=PORT)

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from rentfleet.bootstrap import get_vehicle_controller
from rentfleet.config import settings
from rentfleet.database import close_database
from rentfleet.routes import vehicles
from contextlib import asynccontextmanager
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Lifecycle events
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting RentFleet API ({settings.storage_backend} storage)")
    get_vehicle_controller()
    yield
    logger.info("Shutting down RentFleet API")
    close_database()


app = FastAPI(
    title="RentFleet API",
    description="Rental fleet vehicle management API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(vehicles.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report unparseable query/body values in the same envelope as rule violations"""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        errors.append(f"{field}: {err['msg']}")
    logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": ", ".join(errors)}
    )


@app.get("/", tags=["root"])
async def root():
    return {
        "message": "Welcome to RentFleet API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["health"])
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "rentfleet.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

import argparse
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel
from starlette.middleware.cors import CORSMiddleware

import settings
from testnetfaucet import api_logger
from testnetfaucet import dependencies
from testnetfaucet.domain.faucet import config as faucet_config
from testnetfaucet.routers import main_router
from testnetfaucet.service.error_responses import APIErrorResponse
from testnetfaucet.service.exception_handlers.exception_handlers import (
    custom_exception_handler,
)
from testnetfaucet.service.middleware.main_middleware import MainMiddleware

logger = api_logger.get()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # ConfigurationError aborts startup before the first request is accepted
    config = faucet_config.load_config()
    dependencies.init_globals(config)
    yield

    logger.info("Shutdown Signal received. Cleaning up...")
    await dependencies.close_globals()
    logger.info("Cleanup complete.")


app = FastAPI(lifespan=lifespan)

app.include_router(
    main_router.router,
)

# order of middleware matters! first middleware called is the last one added
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(MainMiddleware)

# Handles API error responses
app.add_exception_handler(APIErrorResponse, custom_exception_handler)
app.add_exception_handler(Exception, custom_exception_handler)

API_TITLE = "Testnet faucet"
API_DESCRIPTION = "Sends test network tokens to empty addresses"


class ApiInfo(BaseModel):
    title: str
    description: str

    class Config:
        json_schema_extra = {
            "example": {
                "title": API_TITLE,
                "description": API_DESCRIPTION,
            }
        }


def get_api_info() -> ApiInfo:
    return ApiInfo(title=API_TITLE, description=API_DESCRIPTION)


@app.get(
    "/",
    summary="Returns API information",
    description="Returns API information",
    response_description="API information with title and description.",
    response_model=ApiInfo,
)
def root():
    return get_api_info()


def main():
    parser = argparse.ArgumentParser(description=API_DESCRIPTION)
    parser.add_argument("--host", help="Host to bind to, defaults to API_HOST")
    parser.add_argument(
        "--port", type=int, help="Port to listen on, defaults to API_PORT"
    )
    args = parser.parse_args()
    # Fail fast on bad configuration, before binding the port
    config = faucet_config.load_config(host=args.host, port=args.port)
    # A single worker: the faucet account nonce is owned by one process
    uvicorn.run(app, host=config.host, port=config.port, workers=1)


if __name__ == "__main__":
    main()

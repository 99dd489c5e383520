from fastapi import Request
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

from testnetfaucet.service.error_responses import APIErrorResponse
from testnetfaucet.service.error_responses import InternalServerAPIError
from testnetfaucet.utils import http_headers


async def custom_exception_handler(_: Request, error: Exception) -> JSONResponse:
    if not isinstance(error, APIErrorResponse):
        error = InternalServerAPIError()
    return await http_headers.add_response_headers(
        JSONResponse(
            status_code=error.to_status_code(),
            content=jsonable_encoder(
                {
                    "response": "NOK",
                    "error": {
                        "status_code": error.to_status_code(),
                        "code": error.to_code(),
                        "message": error.to_message(),
                    },
                }
            ),
        ),
    )

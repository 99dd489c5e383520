from starlette.responses import Response

import settings


async def add_response_headers(response: Response) -> Response:
    response.headers["Access-Control-Allow-Origin"] = ",".join(settings.ALLOWED_ORIGINS)
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    return response

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from typing import Optional, Any
from pydantic import BaseModel


def build_response(
    status_code: int,
    success: bool = True,
    message: str = None,
    data: Any = None,
    meta: Optional[dict] = None,
    error: Optional[str] = None,
) -> Response:
    if status_code == 204:
        return Response(status_code=204)

    response = {"success": success}

    if message is not None:
        response["message"] = message

    if data is not None:
        # Pydantic models and lists of them are dumped in JSON mode
        if isinstance(data, BaseModel):
            response["data"] = data.model_dump(mode="json")
        elif isinstance(data, list) and all(isinstance(item, BaseModel) for item in data):
            response["data"] = [item.model_dump(mode="json") for item in data]
        else:
            response["data"] = jsonable_encoder(data)

    if meta is not None:
        response["meta"] = jsonable_encoder(meta)

    if error is not None:
        response["error"] = error

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json",
    )

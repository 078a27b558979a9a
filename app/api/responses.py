from typing import Any, Dict, List, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(
    data: Any = None,
    message: str = "",
    status_code: int = 200,
    success: Optional[bool] = None,
    errors: Optional[Dict[str, List[str]]] = None,
    **extra: Any,
) -> JSONResponse:
    """Enveloppe commune à toutes les réponses : {success, data, message[, errors]}."""
    if success is None:
        success = status_code < 400

    body: Dict[str, Any] = {"success": success, "data": data, "message": message}
    body.update(extra)
    if errors is not None:
        body["errors"] = errors

    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

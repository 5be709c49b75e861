from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
def health(request: Request):
    snapshot = getattr(request.app.state, "snapshot", None)
    if snapshot is None:
        return JSONResponse(status_code=503, content={"status": "loading", "documents": 0})
    return {"status": "ok", "documents": len(snapshot)}

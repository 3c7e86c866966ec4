from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import TaskError, TaskValidationError
from .logging_setup import setup_logging
from .routers import ad_scripts

setup_logging()

app = FastAPI(title="Ad Script Service", version="1.0.0")
app.include_router(ad_scripts.router)


@app.exception_handler(TaskError)
async def task_error_handler(request: Request, exc: TaskError):
    body = {"message": exc.message}
    if isinstance(exc, TaskValidationError):
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=422,
        content={"message": TaskValidationError.message, "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.get("/health")
async def health():
    return {"status": "ok"}

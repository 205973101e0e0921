"""
HTTP trigger for the rollcall.

A scheduler (or an operator) calls /rollcall; the response body is the JSON
encoded one-line summary. Requests to a localhost host, or carrying
?sandbox=true, run against the sandbox repository.
"""

import re
from typing import Optional

from fastapi import FastAPI, HTTPException, Request

from .schemas import HealthResponse, ErrorResponse
from ..core.config import TRUTHY, VERSION, debug_enabled, load_settings, sandbox_forced, validate_settings
from ..core.errors import RollcallError
from ..core.rollcall import run_rollcall
from ..util.logging import logger

LOCAL_HOST = re.compile(r"^localhost(?::[0-9]+$|$)", re.IGNORECASE)

# Initialize the FastAPI application
app = FastAPI(
    title="Journal Club Rollcall",
    version=VERSION,
    description="Reminds journal club owners to keep their listing current",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


def is_sandbox_request(host: Optional[str], sandbox_param: Optional[str]) -> bool:
    """Local hosts and an explicit ?sandbox flag both select the sandbox."""
    if host and LOCAL_HOST.match(host):
        return True
    return bool(sandbox_param) and sandbox_param.strip().lower() in TRUTHY


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Report version and configuration problems without touching any API."""
    issues = validate_settings(load_settings())
    return HealthResponse(
        status="healthy" if not issues else "misconfigured",
        version=VERSION,
        sandbox_default=sandbox_forced(),
        config_issues=issues
    )


@app.api_route("/rollcall", methods=["GET", "POST"], response_model=str,
               responses={500: {"model": ErrorResponse}})
def rollcall_endpoint(request: Request, sandbox: Optional[str] = None):
    """Run one rollcall and return its summary."""
    settings = load_settings(sandbox=is_sandbox_request(request.headers.get("host"), sandbox))

    try:
        return run_rollcall(settings)
    except RollcallError as e:
        logger.error(f"Rollcall failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

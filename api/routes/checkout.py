"""
Checkout page route
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from core.dependencies import get_settings
from core.settings import Settings

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/checkout", response_class=HTMLResponse, include_in_schema=False)
async def checkout(request: Request, settings: Settings = Depends(get_settings)):
    return templates.TemplateResponse(
        request,
        "checkout.html",
        {"client_id": settings.PAYPAL_CLIENT_ID, "currency": "EUR"},
    )

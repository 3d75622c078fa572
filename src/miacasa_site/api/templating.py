from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from miacasa_site.config import get_settings


TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    ctx = {"site_name": get_settings().site_name}
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)

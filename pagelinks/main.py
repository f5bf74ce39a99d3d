"""Demo FastAPI application rendering paginated articles with the helpers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from pagelinks.core.config import get_settings
from pagelinks.core.metrics import build_metrics_response, instrument_http_request
from pagelinks.helpers.registration import register_helpers
from pagelinks.shared.exceptions import NotFoundException, register_exception_handlers
from pagelinks.shared.pagination import (
    Page,
    PaginationParams,
    get_pagination_params,
    paginate_sequence,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class Article(BaseModel):
    """Sample article shown by the demo pages."""

    id: int
    title: str


ARTICLES: list[Article] = [
    Article(id=number, title=f"Article #{number}") for number in range(1, 121)
]

templates = Jinja2Templates(directory=str(settings.views_dir))
register_helpers(templates)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s", settings.app_name)
    yield
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)


def _find_article(article_id: int) -> Article:
    for article in ARTICLES:
        if article.id == article_id:
            return article
    raise NotFoundException(f"Article {article_id} not found")


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
@app.get("/articles", response_class=HTMLResponse)
async def list_articles(
    request: Request,
    pagination: PaginationParams = Depends(get_pagination_params),
) -> HTMLResponse:
    """Render one page of articles with page links."""
    page: Page[Article] = paginate_sequence(ARTICLES, pagination)
    return templates.TemplateResponse(
        request,
        "articles/index.html",
        {"articles": page, "app_name": settings.app_name},
    )


@app.get("/articles/{article_id}", response_model=Article)
async def get_article(article_id: int) -> Article:
    """Return one article."""
    return _find_article(article_id)


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness check endpoint."""
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()

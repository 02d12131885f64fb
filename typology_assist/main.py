import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .errors import CatalogUnavailable
from .models import AdvisoryResult, AnalyseRequest, AnalyseResponse, ScenarioMetadata
from .narrative import build_filing_paragraph, build_full_card, build_narrative
from .rules import RuleEngine

# ------------------------------------------------------------------
#  Configuration
# ------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
TYPOLOGIES_PATH = os.getenv(
    "TYPOLOGIES_PATH",
    str(BASE_DIR / "typologies" / "typologies.yaml"),
)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Typology Triage Assistant", version="1.0.0")

app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=BASE_DIR / "templates")

# ------------------------------------------------------------------
#  Form options
# ------------------------------------------------------------------
COUNTRY_OPTIONS = ["GLOBAL", "IN", "EU", "US", "OTHER"]
DOMAIN_OPTIONS = ["marketplace", "psp", "banking", "cards", "crypto", "remittance"]
CUSTOMER_TYPES = ["individual", "sole_proprietor", "company", "merchant", "ngo"]
BANDS = ["low", "medium", "high"]

# ------------------------------------------------------------------
#  Core Engine
# ------------------------------------------------------------------
_engine: Optional[RuleEngine] = None


def load_engine() -> Optional[RuleEngine]:
    global _engine
    try:
        _engine = RuleEngine.from_path(TYPOLOGIES_PATH)
    except CatalogUnavailable:
        logger.exception("Typology catalog unavailable; analysis routes will return 503")
        _engine = None
    return _engine


def get_engine() -> RuleEngine:
    if _engine is None:
        raise HTTPException(status_code=503, detail="Typology catalog unavailable")
    return _engine


load_engine()


def _analyse(meta: ScenarioMetadata, scenario: str) -> AdvisoryResult:
    if not scenario.strip():
        raise HTTPException(status_code=422, detail="Please enter a brief scenario description.")
    return get_engine().analyse(meta, scenario.strip())


def _page(request: Request, **context):
    context.update(
        countries=COUNTRY_OPTIONS,
        domains=DOMAIN_OPTIONS,
        customer_types=CUSTOMER_TYPES,
        bands=BANDS,
    )
    return templates.TemplateResponse(request, "index.html", context)

# ------------------------------------------------------------------
#  UI Routes
# ------------------------------------------------------------------
@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the scenario form."""
    return _page(request)


@app.post("/analyze", response_class=HTMLResponse)
async def analyze_scenario(
    request: Request,
    scenario: str = Form(""),
    country: str = Form("GLOBAL"),
    domain: str = Form(""),
    product: str = Form(""),
    customer_type: str = Form(""),
    amount_band: str = Form(""),
    volume_band: str = Form(""),
    cross_border: str = Form("No"),
):
    """
    Handle form submissions from the UI.
    Same analysis as the /analyse API, rendered back into the page.
    """
    meta = ScenarioMetadata(
        country=country,
        domain=domain,
        product=product,
        customer_type=customer_type,
        amount_band=amount_band,
        volume_band=volume_band,
        cross_border=cross_border,
    )
    if not scenario.strip():
        return _page(request, meta=meta, error="Please enter a brief scenario description.")

    result = _analyse(meta, scenario)
    return _page(
        request,
        meta=meta,
        scenario=scenario,
        result=result,
        narrative=build_narrative(result),
        filing_paragraph=build_filing_paragraph(result),
        card=build_full_card(result),
    )

# ------------------------------------------------------------------
#  API Routes
# ------------------------------------------------------------------
@app.get("/health")
def health():
    return {
        "ok": True,
        "typologies_loaded": _engine is not None,
        "count": len(_engine.rules) if _engine is not None else 0,
    }


@app.get("/typologies")
def get_typologies():
    return get_engine().catalog()


@app.post("/typologies/reload")
def reload_typologies():
    engine = load_engine()
    if engine is None:
        raise HTTPException(status_code=503, detail="Typology catalog unavailable")
    return {"reloaded": True, "count": len(engine.rules)}


@app.post("/analyse", response_model=AnalyseResponse)
def analyse(req: AnalyseRequest):
    result = _analyse(req.meta, req.scenario)
    return AnalyseResponse(
        result=result,
        narrative=build_narrative(result),
        filing_paragraph=build_filing_paragraph(result),
    )


@app.post("/card", response_class=PlainTextResponse)
def card(req: AnalyseRequest):
    return build_full_card(_analyse(req.meta, req.scenario))

# path: quizlite/api/http/routes.py
import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from quizlite.app.services.config_service import ConfigService
from quizlite.app.services.recommendation_service import RecommendationService
from quizlite.domain.errors import ConfigError, ValidationError
from quizlite.shared.config import APP_PROXY_PREFIX
from quizlite.shared.logger import logger

router = APIRouter(prefix=APP_PROXY_PREFIX)
health_router = APIRouter()


def get_services(request: Request) -> Dict[str, Any]:
    return request.app.state.services


def require_admin(
    services: Dict[str, Any] = Depends(get_services),
    x_admin_secret: Optional[str] = Header(default=None),
) -> None:
    expected = services.get('admin_secret')
    if not expected:
        raise HTTPException(status_code=503, detail="Admin editing is disabled.")
    if not x_admin_secret or not secrets.compare_digest(x_admin_secret.encode(), expected.encode()):
        logger.warning("Rejected admin request with a missing or wrong secret.")
        raise HTTPException(status_code=401, detail="Unauthorized")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@health_router.get("/health")
async def health():
    return {"ok": True}


@router.get("/config")
async def get_config(services: Dict[str, Any] = Depends(get_services)):
    config_service: ConfigService = services['config_service']
    try:
        config = config_service.get_config()
    except ConfigError as e:
        logger.error(f"Could not load quiz config: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Config error"})
    return {"success": True, "config": config.to_dict(), "shop": services.get('shop', '')}


@router.post("/recommend")
async def recommend(request: Request, services: Dict[str, Any] = Depends(get_services)):
    recommendation_service: RecommendationService = services['recommendation_service']
    body = await _read_json(request)
    answers = body.get('answers') if isinstance(body, dict) else None
    if not isinstance(answers, list):
        answers = []
    try:
        products = await recommendation_service.recommend_from_pairs(answers)
    except Exception as e:
        logger.error(f"Recommendation failed for {len(answers)} answer(s): {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Recommendation failed"})
    return {"success": True, "products": [p.to_dict() for p in products]}


@router.get("/admin/config", dependencies=[Depends(require_admin)])
async def admin_get_config(services: Dict[str, Any] = Depends(get_services)):
    config_service: ConfigService = services['config_service']
    try:
        document = config_service.get_document()
    except ConfigError as e:
        logger.error(f"Admin could not load quiz config: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Config error"})
    return {"success": True, "config": document}


@router.put("/admin/config", dependencies=[Depends(require_admin)])
async def admin_put_config(request: Request, services: Dict[str, Any] = Depends(get_services)):
    config_service: ConfigService = services['config_service']
    document = await _read_json(request)
    try:
        config = config_service.replace_document(document)
    except ValidationError as e:
        logger.warning(f"Rejected admin config update: {e}")
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    except OSError as e:
        logger.error(f"Could not write quiz config: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Config error"})
    return {"success": True, "questions": len(config.questions)}
# path: quizlite/api/http/routes.py

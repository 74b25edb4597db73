# START OF FILE: quizlite/app/services/recommendation_service.py

from typing import Any, Dict, Iterable, List, Optional

from quizlite.app.services.materializer import ResultMaterializer
from quizlite.app.services.resolver import resolve
from quizlite.domain.answers import AnswerMap
from quizlite.domain.models import ProductSummary, QuizConfig
from quizlite.infra.clients.config_store import JsonConfigStore
from quizlite.shared.logger import logger


class RecommendationService:
    def __init__(self, store: JsonConfigStore, materializer: ResultMaterializer):
        self.store = store
        self.materializer = materializer
        logger.info("RecommendationService initialized.")

    async def recommend(self, answers: AnswerMap, config: Optional[QuizConfig] = None) -> List[ProductSummary]:
        """
        Resolves answers to handles and enriches them. When no config is given
        the current document is read from the store, so ConfigError can surface
        here; catalog problems never do.
        """
        if config is None:
            config = self.store.load()
        handles = resolve(answers, config)
        if not handles:
            logger.info(f"No recommendations for {len(answers)} answer(s).")
            return []
        products = await self.materializer.materialize(handles)
        degraded = sum(1 for p in products if p.is_degraded)
        logger.info(f"Recommended {len(products)} product(s), {degraded} without catalog details.")
        return products

    async def recommend_from_pairs(self, pairs: Iterable[Dict[str, Any]]) -> List[ProductSummary]:
        return await self.recommend(AnswerMap.from_pairs(pairs))

# END OF FILE: quizlite/app/services/recommendation_service.py

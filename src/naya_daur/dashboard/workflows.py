"""Dashboard workflows built on the grounded retriever.

Each workflow builds its prompt, runs the two-phase retrieval with its
schema and validates the answer into a typed model.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from naya_daur.exceptions import ResponseValidationError

from .models import CampaignConcept, CampaignStrategy, MarketAnalysis, PersonaSet
from .prompts import (
    CampaignInputs,
    MarketInputs,
    campaign_prompt,
    concept_image_prompt,
    market_analysis_prompt,
    persona_prompt,
)
from .schemas import CAMPAIGN_SCHEMA, MARKET_ANALYSIS_SCHEMA, PERSONA_SCHEMA

if TYPE_CHECKING:
    from naya_daur.client import GroundedJSONRetriever, ImageGenerator
    from naya_daur.client.grounded import ProgressCallback

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseValidationError(
            f"Structured output does not match {model.__name__}: {e}"
        ) from e


async def generate_personas(
    retriever: GroundedJSONRetriever,
    product: str,
    location: str,
    on_progress: ProgressCallback | None = None,
) -> PersonaSet:
    """Persona Architect: three grounded personas for a product and place."""
    data = await retriever.retrieve(
        persona_prompt(product, location), PERSONA_SCHEMA, on_progress
    )
    result = _validate(PersonaSet, data)
    log.info(
        "Generated %d personas for %r in %r", len(result.personas), product, location
    )
    return result


async def analyze_market_position(
    retriever: GroundedJSONRetriever,
    inputs: MarketInputs,
    on_progress: ProgressCallback | None = None,
) -> MarketAnalysis:
    """Market Position Analyzer report for one company."""
    data = await retriever.retrieve(
        market_analysis_prompt(inputs), MARKET_ANALYSIS_SCHEMA, on_progress
    )
    return _validate(MarketAnalysis, data)


async def forge_campaign(
    retriever: GroundedJSONRetriever,
    inputs: CampaignInputs,
    on_progress: ProgressCallback | None = None,
) -> CampaignStrategy:
    """Campaign Forge strategy; concepts without an id are numbered from 1."""
    data = await retriever.retrieve(
        campaign_prompt(inputs), CAMPAIGN_SCHEMA, on_progress
    )
    strategy = _validate(CampaignStrategy, data)
    strategy.concepts = [
        concept if concept.id else concept.model_copy(update={"id": index + 1})
        for index, concept in enumerate(strategy.concepts)
    ]
    return strategy


async def render_concept_images(
    generator: ImageGenerator,
    inputs: CampaignInputs,
    concept: CampaignConcept,
    sample_count: int | None = None,
) -> list[str]:
    """Images for one campaign concept as PNG data URIs."""
    prompt = concept_image_prompt(inputs, concept.title, concept.visual_idea)
    return await generator.generate(prompt, sample_count)

"""Marketing dashboard workflows: personas, market position and campaigns."""

from .models import (
    CampaignConcept,
    CampaignStrategy,
    MarketAnalysis,
    Persona,
    PersonaSet,
)
from .prompts import CampaignInputs, MarketInputs
from .schemas import CAMPAIGN_SCHEMA, MARKET_ANALYSIS_SCHEMA, PERSONA_SCHEMA
from .workflows import (
    analyze_market_position,
    forge_campaign,
    generate_personas,
    render_concept_images,
)

__all__ = [
    "CAMPAIGN_SCHEMA",
    "MARKET_ANALYSIS_SCHEMA",
    "PERSONA_SCHEMA",
    "CampaignConcept",
    "CampaignInputs",
    "CampaignStrategy",
    "MarketAnalysis",
    "MarketInputs",
    "Persona",
    "PersonaSet",
    "analyze_market_position",
    "forge_campaign",
    "generate_personas",
    "render_concept_images",
]

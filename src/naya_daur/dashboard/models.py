"""Typed views of the structured results returned for each workflow.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Dump using the camelCase names the API and UI use."""
        return self.model_dump(by_alias=True, mode="json")


# --- Persona Architect ---


class Persona(_WireModel):
    name: str
    age: int | float
    role: str
    demographic: str
    psychographics: list[str]
    pain_points: list[str]
    motivators: list[str]
    preferred_channels: list[str]
    key_message: str


class PersonaSet(_WireModel):
    personas: list[Persona]


# --- Market Position Analyzer ---


class CulturalValue(_WireModel):
    trait: str | None = None
    alignment: str | None = None
    implication: str | None = None


class MarketSentiment(_WireModel):
    summary: str | None = None
    positive: float | None = None
    neutral: float | None = None
    negative: float | None = None


class PerformanceBenchmark(_WireModel):
    metric: str | None = None
    your_brand: float | None = None
    industry_average: float | None = None


class RadarPoint(_WireModel):
    subject: str | None = None
    score: float | None = Field(default=None, alias="A")
    full_mark: float | None = None


class RegionalPerformance(_WireModel):
    region: str | None = None
    sentiment: Literal["Positive", "Neutral", "Negative"] | None = None
    summary: str | None = None


class CompetitorBenchmark(_WireModel):
    metric: str | None = None
    your_brand: float | None = None
    competitor1: float | None = None
    competitor2: float | None = None


class MarketAnalysis(_WireModel):
    cultural_insights: str
    cultural_value_alignment: list[CulturalValue]
    market_sentiment: MarketSentiment
    recommendations: list[str]
    performance_benchmarks: list[PerformanceBenchmark]
    consumer_sentiment_analysis: str
    key_cultural_themes: list[str]
    brand_performance_radar: list[RadarPoint]
    regional_performance: list[RegionalPerformance]
    competitor_benchmarks: list[CompetitorBenchmark]


# --- Campaign Forge ---


class KPI(_WireModel):
    metric: str | None = None
    value: str | None = None


class CampaignFramework(_WireModel):
    core_message: str | None = None
    channel_strategy: str | None = None
    content_calendar: str | None = None
    risk_mitigation: str | None = None


class CampaignConcept(_WireModel):
    id: int | None = None
    title: str
    summary: str | None = None
    visual_idea: str | None = None


class CampaignStrategy(_WireModel):
    strategy: str
    rationale: str
    kpis: list[KPI]
    framework: CampaignFramework
    concepts: list[CampaignConcept]

"""Prompt builders for the dashboard workflows."""

from dataclasses import dataclass
from textwrap import dedent


@dataclass(frozen=True)
class MarketInputs:
    company_name: str
    website: str
    location: str
    product: str
    competitors: str


@dataclass(frozen=True)
class CampaignInputs:
    company_name: str
    website: str
    country: str
    city: str
    image_url: str = ""


def persona_prompt(product: str, location: str) -> str:
    return dedent(f"""\
        Act as a senior market researcher. Generate 3 distinct, deep-dive marketing personas for a company selling "{product}" in "{location}".
        For each persona, find real, data-backed psychographics, pain points, motivations, media consumption habits, and a key persuasive message.
        Ensure the personas are distinct and realistic for the specified location.
        """)


def market_analysis_prompt(inputs: MarketInputs) -> str:
    return dedent(f"""\
        Analyze the market position for:
        - Company: {inputs.company_name} ({inputs.website})
        - Location: {inputs.location}
        - Product: {inputs.product}
        - Competitors: {inputs.competitors}

        Provide a detailed, text-based report covering:
        1.  Cultural Insights: Key cultural nuances in {inputs.location} relevant to {inputs.product}.
        2.  Cultural Value Alignment: (e.g., Trait: Aspiration, Alignment: High, Implication: Strong appeal)
        3.  Market Sentiment Analysis: Overall sentiment with estimated percentages (e.g., 70% positive).
        4.  Recommendations: 3-5 actionable recommendations.
        5.  Performance Benchmarks: Estimated Brand Awareness and Purchase Intent vs. industry average (e.g., Brand Awareness: 40% vs Industry 45%).
        6.  Consumer Sentiment Analysis: Deeper dive into what consumers are saying.
        7.  Key Cultural Themes: Top 3 cultural themes to leverage.
        8.  Brand Performance Radar: 5 subjects (e.g., 'Innovation', 'Trust') and scores out of 100.
        9.  Regional Performance: 4-6 key cities/regions in '{inputs.location}' and their sentiment.
        10. Competitor Benchmarks: Compare '{inputs.company_name}' against '{inputs.competitors}' on 2-3 key metrics.
        """)


def campaign_prompt(inputs: CampaignInputs) -> str:
    return dedent(f"""\
        Create a full campaign strategy for:
        - Company: {inputs.company_name} ({inputs.website})
        - Target: {inputs.city}, {inputs.country}
        - Reference Image (Optional): {inputs.image_url}

        Provide a detailed text report covering:
        1.  strategy: A brief campaign strategy.
        2.  rationale: The rationale behind it.
        3.  kpis: A list of 3-4 conservative KPI estimations (e.g., Brand Awareness Lift: 5-10%).
        4.  framework: Details for coreMessage, channelStrategy, contentCalendar, and riskMitigation.
        5.  concepts: A list of 6 distinct campaign concepts. Each concept should have a title, summary, and a visualIdea (a short description for an image generator).
        """)


def concept_image_prompt(
    inputs: CampaignInputs, title: str, visual_idea: str | None
) -> str:
    return dedent(f"""\
        Create a high-quality, visually appealing campaign image for an ad.
        The campaign is for: {inputs.company_name}
        The concept is: {title}.
        Visual Idea: {visual_idea or title}.
        Target location: {inputs.city}, {inputs.country}.
        Style: Modern, professional, tech-focused, dark theme.
        Use a color palette of deep purple, indigo, bright violet, and white text.
        """)

"""Response schemas for the dashboard workflows.

These use the generation API's ``responseSchema`` dialect (upper-case type
names, ``required`` and ``enum``), so they are sent on the wire as-is.
"""

from typing import Any

STRING: dict[str, Any] = {"type": "STRING"}
NUMBER: dict[str, Any] = {"type": "NUMBER"}


def array_of(items: dict[str, Any]) -> dict[str, Any]:
    return {"type": "ARRAY", "items": items}


def object_of(
    properties: dict[str, Any], required: list[str] | None = None
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "OBJECT", "properties": properties}
    if required:
        schema["required"] = required
    return schema


PERSONA_FIELDS = [
    "name",
    "age",
    "role",
    "demographic",
    "psychographics",
    "painPoints",
    "motivators",
    "preferredChannels",
    "keyMessage",
]

PERSONA_SCHEMA = object_of(
    {
        "personas": array_of(
            object_of(
                {
                    "name": STRING,
                    "age": NUMBER,
                    "role": STRING,
                    "demographic": STRING,
                    "psychographics": array_of(STRING),
                    "painPoints": array_of(STRING),
                    "motivators": array_of(STRING),
                    "preferredChannels": array_of(STRING),
                    "keyMessage": STRING,
                },
                required=PERSONA_FIELDS,
            )
        )
    },
    required=["personas"],
)

MARKET_ANALYSIS_SCHEMA = object_of(
    {
        "culturalInsights": STRING,
        "culturalValueAlignment": array_of(
            object_of({"trait": STRING, "alignment": STRING, "implication": STRING})
        ),
        "marketSentiment": object_of(
            {
                "summary": STRING,
                "positive": NUMBER,
                "neutral": NUMBER,
                "negative": NUMBER,
            }
        ),
        "recommendations": array_of(STRING),
        "performanceBenchmarks": array_of(
            object_of({"metric": STRING, "yourBrand": NUMBER, "industryAverage": NUMBER})
        ),
        "consumerSentimentAnalysis": STRING,
        "keyCulturalThemes": array_of(STRING),
        "brandPerformanceRadar": array_of(
            object_of({"subject": STRING, "A": NUMBER, "fullMark": NUMBER})
        ),
        "regionalPerformance": array_of(
            object_of(
                {
                    "region": STRING,
                    "sentiment": {
                        "type": "STRING",
                        "enum": ["Positive", "Neutral", "Negative"],
                    },
                    "summary": STRING,
                }
            )
        ),
        "competitorBenchmarks": array_of(
            object_of(
                {
                    "metric": STRING,
                    "yourBrand": NUMBER,
                    "competitor1": NUMBER,
                    "competitor2": NUMBER,
                }
            )
        ),
    },
    required=[
        "culturalInsights",
        "culturalValueAlignment",
        "marketSentiment",
        "recommendations",
        "performanceBenchmarks",
        "consumerSentimentAnalysis",
        "keyCulturalThemes",
        "brandPerformanceRadar",
        "regionalPerformance",
        "competitorBenchmarks",
    ],
)

CAMPAIGN_SCHEMA = object_of(
    {
        "strategy": STRING,
        "rationale": STRING,
        "kpis": array_of(object_of({"metric": STRING, "value": STRING})),
        "framework": object_of(
            {
                "coreMessage": STRING,
                "channelStrategy": STRING,
                "contentCalendar": STRING,
                "riskMitigation": STRING,
            }
        ),
        "concepts": array_of(
            object_of(
                {
                    "id": NUMBER,
                    "title": STRING,
                    "summary": STRING,
                    "visualIdea": STRING,
                }
            )
        ),
    },
    required=["strategy", "rationale", "kpis", "framework", "concepts"],
)

"""Two-phase grounded JSON retrieval.

Search grounding and schema-constrained output cannot be requested in the
same generation call, so a structured, grounded answer takes two round trips:

1. a grounded generation call that returns free text backed by web search;
2. a re-parse call that feeds that text back with a JSON response schema
   and no tools.

Either phase failing aborts the whole retrieval; nothing partial is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any, TypeAlias

from naya_daur.constants import (
    JSON_MIME_TYPE,
    PROGRESS_STEP_1,
    PROGRESS_STEP_2,
    SEARCH_GROUNDING_TOOL,
)
from naya_daur.exceptions import GroundingStepError, ResponseParseError

from .base import BaseGeminiClient

if TYPE_CHECKING:
    import httpx

log = logging.getLogger(__name__)

ProgressCallback: TypeAlias = Callable[[str], None]
JSONSchema: TypeAlias = Mapping[str, Any]

T_GROUNDED_RETRIEVE = "grounded.retrieve"
T_PHASE_1 = "phase1"
T_PHASE_2 = "phase2"

REPARSE_PROMPT_TEMPLATE = """\
Parse the following text and convert it into a valid JSON object matching the provided schema.

TEXT TO PARSE:
---
{text}
---

Respond ONLY with the valid JSON object.
"""


@dataclass(frozen=True)
class RequestDescriptor:
    """What a caller asks for: a prompt and the shape of the answer."""

    prompt: str
    schema: JSONSchema | None = None


def build_grounded_payload(prompt: str) -> dict[str, Any]:
    """Request body for a search-grounded free-text generation."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "tools": [{SEARCH_GROUNDING_TOOL: {}}],
    }


def build_text_payload(prompt: str) -> dict[str, Any]:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def build_reparse_prompt(grounded_text: str) -> str:
    return REPARSE_PROMPT_TEMPLATE.format(text=grounded_text)


def build_structured_payload(
    grounded_text: str, schema: JSONSchema | None
) -> dict[str, Any]:
    """Request body that asks the model to restate ``grounded_text`` as JSON."""
    generation_config: dict[str, Any] = {"responseMimeType": JSON_MIME_TYPE}
    if schema is not None:
        generation_config["responseSchema"] = dict(schema)
    return {
        "contents": [{"parts": [{"text": build_reparse_prompt(grounded_text)}]}],
        "generationConfig": generation_config,
    }


def extract_candidate_text(body: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or None if absent."""
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GroundedJSONRetriever(BaseGeminiClient):
    """Fetches search-grounded answers, optionally restructured as JSON.

    Example:
        retriever = GroundedJSONRetriever(api_key)
        data = await retriever.retrieve(prompt, schema, on_progress=print)
    """

    async def retrieve(
        self,
        prompt: str,
        schema: JSONSchema | None,
        on_progress: ProgressCallback | None = None,
    ) -> Any:
        """Run both phases and return the parsed JSON object.

        Raises:
            GroundingStepError: A phase returned no candidate text.
            ResponseParseError: Phase 2 text is not valid JSON.
            APIError: Non-retriable HTTP error from either call.
            NetworkError: Transport kept failing after all retries.
        """
        request = RequestDescriptor(prompt=prompt, schema=schema)
        url = self.endpoint(self.config.model, "generateContent")

        async with self._http_client() as client:
            with self._tele(T_GROUNDED_RETRIEVE, model=self.config.model):
                _notify(on_progress, PROGRESS_STEP_1)
                with self._tele(T_PHASE_1):
                    grounded_text = await self._generate(
                        client, url, build_grounded_payload(request.prompt)
                    )
                if not grounded_text:
                    raise GroundingStepError(1, "No content returned from analysis.")
                log.debug("Phase 1 returned %d characters", len(grounded_text))

                _notify(on_progress, PROGRESS_STEP_2)
                with self._tele(T_PHASE_2):
                    json_text = await self._generate(
                        client,
                        url,
                        build_structured_payload(grounded_text, request.schema),
                    )
                if not json_text:
                    raise GroundingStepError(
                        2, "No JSON content returned from parsing."
                    )

        try:
            return json.loads(json_text)
        except json.JSONDecodeError as e:
            raise ResponseParseError(
                f"Structured output is not valid JSON: {e}"
            ) from e

    async def generate_text(self, prompt: str, *, grounded: bool = True) -> str:
        """Single generation call returning the first candidate's text."""
        url = self.endpoint(self.config.model, "generateContent")
        payload = (
            build_grounded_payload(prompt) if grounded else build_text_payload(prompt)
        )
        async with self._http_client() as client:
            with self._tele(T_PHASE_1, model=self.config.model):
                text = await self._generate(client, url, payload)
        if not text:
            raise GroundingStepError(1, "No content returned from analysis.")
        return text

    async def _generate(
        self, client: httpx.AsyncClient, url: httpx.URL, payload: dict[str, Any]
    ) -> str | None:
        body = await self._post(client, url, payload)
        return extract_candidate_text(body)


def _notify(on_progress: ProgressCallback | None, message: str) -> None:
    log.debug(message)
    if on_progress is not None:
        on_progress(message)


async def retrieve_grounded_json(
    api_key: str | None,
    prompt: str,
    schema: JSONSchema | None,
    on_progress: ProgressCallback | None = None,
    **client_options: Any,
) -> Any:
    """Convenience wrapper around ``GroundedJSONRetriever.retrieve``.

    ``client_options`` are forwarded to the retriever (``config``, ``client``,
    ``telemetry`` or configuration overrides such as ``model``).
    """
    retriever = GroundedJSONRetriever(api_key, **client_options)
    return await retriever.retrieve(prompt, schema, on_progress)

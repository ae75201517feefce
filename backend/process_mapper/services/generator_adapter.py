"""Generative augmentation adapter: one chat-completions call, no retries.

The adapter only fetches and parses.  It never decides what goes into a map:
its raw payload is handed to ``payload_normalizer`` and any failure here
sends the caller down the deterministic benchmark path.
"""

from __future__ import annotations

import json
import logging
import re

import httpx

from process_mapper.config import settings
from process_mapper.core.errors import GeneratorUnavailableError, MalformedPayloadError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an ISO 9001:2015 process mapping expert. Generate comprehensive process "
    "documentation in JSON format. Always include benchmark industry processes even if "
    "not mentioned by the user. Focus on realistic process interactions and flows."
)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def build_prompt(industry: str, user_processes: list[str]) -> str:
    listed = ", ".join(user_processes) if user_processes else "(none given)"
    return f"""Generate an ISO 9001:2015 process map for the {industry} industry.

User mentioned these processes: {listed}

Requirements:
1. Include industry benchmark processes (core, support, management) even if not mentioned by the user
2. Add process interactions showing how processes feed into each other
3. Categorize every process as core, support or management
4. Include realistic inputs, outputs, risks, KPIs and responsible roles (max 4 inputs and 4 outputs)
5. Map each process to relevant ISO 9001:2015 clauses

Return ONLY valid JSON in this exact format:
{{
  "processes": [
    {{
      "name": "Process Name",
      "category": "core|support|management",
      "inputs": ["input1", "input2"],
      "outputs": ["output1", "output2"],
      "risk": "Primary risk description",
      "kpi": "Key performance indicator",
      "owner": "Responsible role",
      "isoClauses": ["8.1"]
    }}
  ],
  "interactions": [
    {{"from": "Source Process Name", "to": "Target Process Name", "description": "What flows"}}
  ],
  "processFlow": {{
    "primaryFlow": ["process1", "process2"],
    "supportingFlows": [{{"name": "Support Flow Name", "processes": ["support1"]}}],
    "feedbackLoops": [{{"from": "end_process", "to": "start_process", "description": "Improvement feedback"}}]
  }}
}}

Focus on {industry} industry best practices."""


def extract_json_object(content: str) -> dict:
    """Pull the outermost JSON object out of a model reply (fences tolerated)."""
    if not isinstance(content, str):
        raise MalformedPayloadError(
            f"Generator content is {type(content).__name__}, expected text"
        )
    match = _JSON_OBJECT_RE.search(content)
    if not match:
        raise MalformedPayloadError("No JSON object found in generator response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"Generator response is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedPayloadError("Generator response is not a JSON object")
    return parsed


class GeneratorAdapter:
    """Thin async wrapper around an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> GeneratorAdapter | None:
        if not settings.generator_configured:
            return None
        return cls(
            api_url=settings.GENERATOR_API_URL,
            api_key=settings.GENERATOR_API_KEY,
            model=settings.GENERATOR_MODEL,
            timeout=settings.GENERATOR_TIMEOUT_SECONDS,
        )

    def _request_body(self, industry: str, user_processes: list[str]) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(industry, user_processes)},
            ],
            "temperature": 0.2,
            "max_tokens": 4000,
            "stream": False,
        }

    async def generate(self, industry: str, user_processes: list[str]) -> dict:
        """Return the raw (unvalidated) process map payload from the model."""
        if not self.api_key:
            raise GeneratorUnavailableError("Generator API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.api_url,
                    headers=headers,
                    json=self._request_body(industry, user_processes),
                )
        except httpx.HTTPError as exc:
            raise GeneratorUnavailableError(f"Generator request failed: {exc}") from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            raise GeneratorUnavailableError(
                f"Generator API error: HTTP {resp.status_code}: {resp.text[:200]}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedPayloadError("Generator API returned a non-JSON body") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedPayloadError("No content received from generator API") from exc

        if not content:
            raise MalformedPayloadError("Generator returned empty content")

        logger.debug("Generator returned %d characters for %r", len(content), industry)
        return extract_json_object(content)

"""AI insights over project records via the OpenAI Responses API.

The service never raises to its callers: a missing API key returns the
UNAVAILABLE text and any SDK or transport failure returns the FAILED
text, so the dashboard can always render something.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from openai import AsyncOpenAI

from ..models import ProjectRecord

logger = logging.getLogger(__name__)

# Records sent as context per request
MAX_SAMPLE_RECORDS = 50

INSIGHTS_UNAVAILABLE = "AI insights are unavailable: no OpenAI API key is configured."
INSIGHTS_FAILED = "Failed to generate insights. Please try again later."
REPORT_UNAVAILABLE = "AI reports are unavailable: no OpenAI API key is configured."
REPORT_FAILED = "Failed to generate report due to an API error. Please try again."
NO_OUTPUT = "No insights generated."

ANALYST_INSTRUCTIONS = (
    "You are an expert data analyst for a utility-connection project tracker. "
    "Keep answers concise, professional, and actionable."
)

REPORT_SECTIONS = """\
1. **Executive Summary**: project label, reference number and identifier.
2. **Current Stage**: the workflow stage and upstream status; emphasize USP escalations.
3. **Location**: zone, block and plot number.
4. **Timeline**: creation date and escalation date where present.
5. **Technical & Financial**: wayleave number, account number and fee status.
6. **Remarks / Outstanding Issues**: the justification note and any missing critical information."""


def project_context(record: ProjectRecord, fee_paid: bool | None = None) -> dict[str, Any]:
    """JSON-safe view of a project for prompts"""
    data: dict[str, Any] = {
        "label": record.label,
        "stage": record.stage.label,
        "status": record.source_status,
        "reference": record.reference_number,
        "plot": record.plot_number,
        "zone": record.zone,
        "block": record.block,
        "wayleave": record.wayleave_number,
        "account": record.account_number,
        "created": record.created_at.date().isoformat(),
    }
    if record.justification:
        data["justification"] = record.justification
    if record.escalation_date:
        data["escalation_date"] = record.escalation_date
    if fee_paid is not None:
        data["fee_paid"] = fee_paid
    return data


def build_insights_prompt(records: Sequence[ProjectRecord], question: str | None = None) -> str:
    sample = json.dumps([project_context(r) for r in records[:MAX_SAMPLE_RECORDS]])
    if question and question.strip():
        return (
            "Given the following dataset of project records "
            f"(fields: label, stage, status, reference, plot, zone, block, wayleave, account, created): {sample}. "
            f"Answer this question: {question.strip()}"
        )
    return (
        "Analyze the following dataset. Provide 3 key insights focusing on stage distribution, "
        f"zones with the most activity, and any bottlenecks in the workflow. Dataset: {sample}"
    )


def build_report_prompt(record: ProjectRecord, fee_paid: bool | None = None) -> str:
    return (
        "The user has requested a full status report for a single project.\n\n"
        f"Project record:\n{json.dumps(project_context(record, fee_paid), indent=2)}\n\n"
        "Write a professional project status report in Markdown with these sections "
        f"where data is available:\n{REPORT_SECTIONS}\n\n"
        "Tone: professional, informative, and direct."
    )


class InsightService:
    """Generates dataset insights and single-project reports."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize the insight service.

        Args:
            api_key: OpenAI API key; empty disables the service
            model: Model name (e.g., 'gpt-4.1-mini')
            timeout: Request timeout in seconds
            client: Pre-built client, mainly for tests
        """
        self.api_key = api_key
        self.model = model
        self.client = client
        if self.client is None and api_key:
            self.client = AsyncOpenAI(api_key=api_key, timeout=timeout)

    @property
    def available(self) -> bool:
        return self.client is not None

    async def generate_insights(self, records: Sequence[ProjectRecord], question: str | None = None) -> str:
        """Insights over at most MAX_SAMPLE_RECORDS records, or an answer to question."""
        if not self.available:
            logger.warning("OpenAI API key is missing; insights disabled")
            return INSIGHTS_UNAVAILABLE
        return await self._generate(build_insights_prompt(records, question), INSIGHTS_FAILED)

    async def generate_report(self, record: ProjectRecord, fee_paid: bool | None = None) -> str:
        if not self.available:
            return REPORT_UNAVAILABLE
        return await self._generate(build_report_prompt(record, fee_paid), REPORT_FAILED)

    async def _generate(self, prompt: str, failed_text: str) -> str:
        assert self.client is not None
        logger.debug(f"Insight prompt: {prompt[:500]}..." if len(prompt) > 500 else f"Insight prompt: {prompt}")
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=prompt,
                instructions=ANALYST_INSTRUCTIONS,
            )
        except Exception as e:
            logger.error(f"OpenAI insight request failed ({type(e).__name__}): {e}")
            return failed_text

        text = (getattr(response, "output_text", "") or "").strip()
        return text or NO_OUTPUT

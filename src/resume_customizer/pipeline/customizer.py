"""Customization entry point: AI path with fallback."""

from __future__ import annotations

import logging
import sqlite3
import time

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from resume_customizer.clients.llm_client import LLMProvider, create_provider
from resume_customizer.config import AppConfig, ProviderSettings
from resume_customizer.errors import AIPipelineError, BudgetExceededError
from resume_customizer.logging import RunLog, RunStore
from resume_customizer.models.customization import CustomizationRequest, CustomizationResult
from resume_customizer.models.resume import DEFAULT_EDITABLE_FIELDS, EditableFields
from resume_customizer.parsers.jd_parser import extract_company_or_role
from resume_customizer.pipeline.budget import compute_item_budget, compute_word_budget
from resume_customizer.pipeline.fallback import FallbackCustomizer, display_config_for
from resume_customizer.pipeline.prompt_builder import PromptStyle, build_prompt, get_style
from resume_customizer.pipeline.validator import ResponseValidator

logger = logging.getLogger(__name__)


class ResumeCustomizer:
    """Runs one customization: prompt, provider call, validation, fallback.

    Only fields allowed by ``editable`` and marked ``_dynamic`` in the base
    resume may change. Any ``AIPipelineError`` on the AI path yields the
    fallback result.
    ``ConfigurationError`` and request validation errors propagate.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        word_multiplier: float = 1.0,
        max_attempts: int = 1,
        editable: EditableFields = DEFAULT_EDITABLE_FIELDS,
        run_store: RunStore | None = None,
        fallback: FallbackCustomizer | None = None,
    ):
        self.provider = provider
        self.word_multiplier = word_multiplier
        self.max_attempts = max_attempts
        self.editable = editable
        self.run_store = run_store
        self.fallback = fallback or FallbackCustomizer()

    async def customize(self, request: CustomizationRequest) -> CustomizationResult:
        start = time.monotonic()
        template = request.instructions or get_style(request.style)
        company_or_role = extract_company_or_role(request.job_description)
        log = RunLog(
            provider=self.provider.name,
            style=request.style if not request.instructions else "custom",
            company_or_role=company_or_role,
        )

        try:
            result = await self._run_ai_path(request, template, log)
        except AIPipelineError as exc:
            if isinstance(exc, BudgetExceededError):
                logger.warning(
                    "AI result rejected, using fallback: kind=%s section=%s actual=%d limit=%d",
                    exc.kind, exc.section, exc.actual, exc.limit,
                )
            else:
                logger.warning("AI path failed, using fallback: kind=%s error=%s", exc.kind, exc)
            result = self.fallback.customize(request, reason=str(exc))
            result.error_kind = exc.kind
            log.fallback_used = True
            log.error_kind = exc.kind
            log.error_message = str(exc)

        result.provider = self.provider.name
        result.company_or_role = company_or_role
        log.elapsed_seconds = time.monotonic() - start
        self._record(log)
        return result

    async def _run_ai_path(
        self, request: CustomizationRequest, template: PromptStyle | str, log: RunLog
    ) -> CustomizationResult:
        base = request.base
        editable = self.editable.intersect(EditableFields.from_markers(base))
        word_budget = compute_word_budget(base, self.word_multiplier)
        item_budget = compute_item_budget(base)
        prompt = build_prompt(
            request.job_description, template, word_budget, item_budget, base, editable
        )
        validator = ResponseValidator(base, word_budget, item_budget, editable)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(AIPipelineError),
            reraise=True,
        ):
            with attempt:
                response = await self.provider.generate(prompt)
                log.input_tokens += response.input_tokens
                log.output_tokens += response.output_tokens
                resume = validator.validate(response.text)

        return CustomizationResult(
            resume=resume,
            reasoning=f"Resume customized using {self.provider.name} based on job requirements",
            config=display_config_for(request.job_description),
        )

    def _record(self, log: RunLog) -> None:
        if self.run_store is None:
            return
        try:
            self.run_store.save_log(log)
        except sqlite3.Error:
            logger.warning("Failed to save run log", exc_info=True)


def create_customizer(
    config: AppConfig,
    provider: str | None = None,
    run_store: RunStore | None = None,
) -> ResumeCustomizer:
    """Wire a customizer from app config and environment credentials.

    Raises ConfigurationError when the provider cannot be built.
    """
    settings = ProviderSettings.from_env(config.llm, provider=provider)
    return ResumeCustomizer(
        create_provider(settings),
        word_multiplier=config.pipeline.word_multiplier,
        max_attempts=config.llm.max_attempts,
        run_store=run_store,
    )

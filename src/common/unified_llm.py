"""
Unified LLM Wrapper - OpenAI Primary, Anthropic Fallback.

Provides a consistent interface for every AI-backed operation. Each call
goes to the primary provider first; any failure there, including a
response the caller's parser rejects, moves the call to the secondary
provider. When both fail, ProviderUnavailableError is raised.

Key Features:
    - Per-step configuration via llm_config.py
    - Parsing happens inside each attempt, so malformed output falls through
    - Backend attribution in every result for transparency
    - No retries beyond the single fallback

Usage:
    from src.common.unified_llm import UnifiedLLM

    llm = UnifiedLLM(step_name="optimize_resume", user_id=user_id)
    result = await llm.invoke(prompt, system=SYSTEM_PROMPT, parser=my_parser)
    print(result.backend)  # "openai" or "anthropic"
    print(result.parsed)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from langchain_core.messages import HumanMessage, SystemMessage

from src.common.error_handling import ProviderUnavailableError
from src.common.llm_config import StepConfig, get_step_config
from src.common.llm_factory import create_primary_llm, create_secondary_llm
from src.common.logger import get_logger


PRIMARY_BACKEND = "openai"
SECONDARY_BACKEND = "anthropic"

ALL_PROVIDERS_FAILED = "Both AI services failed"

# Text prompt, or a list of LangChain content blocks for multimodal calls
PromptContent = Union[str, List[Dict[str, Any]]]
ResponseParser = Callable[[str], Any]


@dataclass
class LLMResult:
    """
    Result of a UnifiedLLM invocation with backend attribution.

    Attributes:
        content: The raw LLM response text
        backend: Which provider produced the response ("openai" or "anthropic")
        model: The model identifier used
        duration_ms: Time taken for the attempt in milliseconds
        success: Whether the attempt succeeded (including parsing)
        parsed: Parser output when a parser was supplied
        error: Error message if the attempt failed
        input_tokens: Number of input tokens (if reported)
        output_tokens: Number of output tokens (if reported)
    """

    content: str
    backend: str
    model: str
    duration_ms: int
    success: bool
    parsed: Any = None
    error: Optional[str] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class UnifiedLLM:
    """
    Unified LLM interface - primary provider with one fallback.

    Attributes:
        config: StepConfig with sampling and fallback settings
        step_name: Name of the operation (for logging)
        user_id: Requesting user, used only as log context
    """

    def __init__(
        self,
        step_name: str,
        config: Optional[StepConfig] = None,
        user_id: Optional[str] = None,
    ):
        self.step_name = step_name
        self.config = config or get_step_config(step_name)
        self.user_id = user_id
        self.log = get_logger(__name__, user_id=user_id, step=step_name)

    def _backends(self) -> List[str]:
        if self.config.use_fallback:
            return [PRIMARY_BACKEND, SECONDARY_BACKEND]
        return [PRIMARY_BACKEND]

    async def invoke(
        self,
        prompt: PromptContent,
        system: Optional[str] = None,
        parser: Optional[ResponseParser] = None,
    ) -> LLMResult:
        """
        Invoke the provider chain.

        Args:
            prompt: User prompt text, or content blocks for multimodal input
            system: Optional system prompt
            parser: Optional callable applied to the response text; raising
                from it counts as a provider failure

        Returns:
            LLMResult from the first provider that succeeded

        Raises:
            ProviderUnavailableError: If every provider failed
        """
        failures: List[str] = []
        for backend in self._backends():
            result = await self._invoke_backend(backend, prompt, system, parser)
            if result.success:
                if failures:
                    self.log.info(
                        f"Recovered on {backend} "
                        f"after: {'; '.join(failures)}"
                    )
                return result
            failures.append(f"{backend}: {result.error}")
            self.log.warning(
                f"{backend} ({result.model}) failed "
                f"after {result.duration_ms}ms: {result.error}"
            )

        self.log.error(
            f"All providers failed: "
            f"{'; '.join(failures)}"
        )
        raise ProviderUnavailableError(ALL_PROVIDERS_FAILED)

    async def _invoke_backend(
        self,
        backend: str,
        prompt: PromptContent,
        system: Optional[str],
        parser: Optional[ResponseParser],
    ) -> LLMResult:
        """
        Run one provider attempt, parse included.

        Never raises; failures come back as LLMResult(success=False).
        """
        if backend == PRIMARY_BACKEND:
            factory = create_primary_llm
            model = self.config.get_primary_model()
        else:
            factory = create_secondary_llm
            model = self.config.get_secondary_model()

        start_time = datetime.utcnow()
        content = ""
        try:
            llm = factory(
                model=model,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )

            messages = []
            if system:
                messages.append(SystemMessage(content=system))
            messages.append(HumanMessage(content=prompt))

            response = await llm.ainvoke(messages)
            content = _response_text(response)
            parsed = parser(content) if parser else None

            input_tokens = None
            output_tokens = None
            usage = getattr(response, "usage_metadata", None)
            if usage:
                input_tokens = usage.get("input_tokens")
                output_tokens = usage.get("output_tokens")

            duration_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)
            self.log.info(
                f"{backend} ({model}) ok in {duration_ms}ms, "
                f"{len(content)} chars"
            )
            return LLMResult(
                content=content,
                backend=backend,
                model=model,
                duration_ms=duration_ms,
                success=True,
                parsed=parsed,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )

        except Exception as e:
            duration_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)
            return LLMResult(
                content=content,
                backend=backend,
                model=model,
                duration_ms=duration_ms,
                success=False,
                error=f"{type(e).__name__}: {e}",
            )


def _response_text(response: Any) -> str:
    """
    Flatten a chat response to text.

    Anthropic may return a list of content blocks instead of a string.
    """
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        content = "".join(parts)
    return str(content).strip()

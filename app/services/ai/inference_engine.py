"""Inference engine — one structured round-trip with the AI provider.

The engine is generic over the result type T and the request type R; the
task-specific parts live in the PromptStrategy / DecodingStrategy pair the
caller passes in. Per call:

    prompts → provider request → HTTP POST → envelope checks
            → (tool-call round) → decoding strategy → T

The engine keeps no per-request state: only the credential, endpoint, model,
HTTP client and tool registry.
"""

import asyncio
import json
import logging
from typing import Any, Generic, TypeVar

import httpx

from app.config import settings
from app.services.ai.strategies import DecodingStrategy, PromptStrategy
from app.services.ai.tools import Tool, ToolRegistry
from app.services.errors import (
    ConfigurationError,
    DeadlineExceededError,
    EmptyResponseError,
    InvalidToolArgumentsError,
    ProviderError,
    ToolExecutionError,
    TransportError,
    UnknownToolError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class InferenceEngine(Generic[T, R]):
    """Structured LLM inference over a chat-completions endpoint.

    Args:
        api_key: Provider credential, sent as a Bearer token. Required.
        endpoint: Chat-completions URL. Defaults to settings.
        model: Provider model identifier. Defaults to settings.
        timeout: HTTP timeout in seconds for an engine-owned client.
        http_client: Shared ``httpx.AsyncClient``. When given, the caller owns it.
        tool_registry: Tools offered to the model. An empty registry is created if omitted.
        tool_follow_up: After executing tool calls, ask the provider for a second
            completion with the tool results instead of decoding the results directly.
    """

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        tool_registry: ToolRegistry | None = None,
        tool_follow_up: bool = False,
        log_responses: bool | None = None,
    ):
        if not api_key:
            raise ConfigurationError("AI provider API key is required")

        self._api_key = api_key
        self.endpoint = endpoint or settings.ai_provider_endpoint
        self.model = model or settings.ai_provider_model
        self.tool_registry = tool_registry if tool_registry is not None else ToolRegistry()
        self.tool_follow_up = tool_follow_up
        self._log_responses = settings.log_provider_responses if log_responses is None else log_responses

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.ai_provider_timeout,
        )

    def register_tool(self, tool: Tool) -> None:
        self.tool_registry.register_tool(tool)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def process_request(
        self,
        prompt_strategy: PromptStrategy[R],
        request: R,
        decoding_strategy: DecodingStrategy[T],
        *,
        timeout: float | None = None,
    ) -> T:
        """Run one inference call and decode the answer into T.

        ``timeout`` is the caller's deadline in seconds for the whole call,
        tool executions included.

        Raises:
            DeadlineExceededError: the deadline or the HTTP timeout elapsed.
            TransportError: the request could not be sent or completed.
            ProviderError / EmptyResponseError: the provider reported an error or no choices.
            UnknownToolError / InvalidToolArgumentsError / ToolExecutionError: tool round failed.
            MalformedOutputError / InvalidDomainOutputError: from the decoding strategy.
        """
        if timeout is None:
            return await self._process(prompt_strategy, request, decoding_strategy)
        try:
            return await asyncio.wait_for(
                self._process(prompt_strategy, request, decoding_strategy),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise DeadlineExceededError(f"AI inference exceeded deadline of {timeout}s", e) from e

    async def _process(
        self,
        prompt_strategy: PromptStrategy[R],
        request: R,
        decoding_strategy: DecodingStrategy[T],
    ) -> T:
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": prompt_strategy.get_system_prompt()},
            {"role": "user", "content": prompt_strategy.get_user_prompt(request)},
        ]

        message = await self._complete(messages)

        tool_calls = message.get("tool_calls") or []
        if not isinstance(tool_calls, list):
            raise ProviderError("unexpected AI provider response shape: tool_calls is not a list")
        if tool_calls:
            results = await self._process_tool_calls(tool_calls)
            if self.tool_follow_up:
                messages.append({
                    "role": "assistant",
                    "content": message.get("content") or "",
                    "tool_calls": tool_calls,
                })
                for result in results:
                    messages.append({
                        "role": "tool",
                        "tool_call_id": result["tool_call_id"],
                        "name": result["name"],
                        "content": json.dumps(result["result"], default=str),
                    })
                # One tool round only: the follow-up must answer in content
                message = await self._complete(messages, tool_choice="none")
                if message.get("tool_calls"):
                    raise ProviderError("AI provider requested more tool calls in the follow-up round")
                content = message.get("content") or ""
            else:
                content = json.dumps(results, default=str)
        else:
            content = message.get("content") or ""

        return decoding_strategy.decode_response(content)

    def build_payload(self, messages: list[dict[str, Any]], tool_choice: str = "auto") -> dict[str, Any]:
        """Chat-completions body for ``messages``; tools are attached when registered."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        if len(self.tool_registry) > 0:
            payload["tools"] = self.tool_registry.list_provider_tools()
            payload["tool_choice"] = tool_choice
        return payload

    async def _complete(self, messages: list[dict[str, Any]], tool_choice: str = "auto") -> dict[str, Any]:
        """POST one completion and return the first choice's message."""
        payload = self.build_payload(messages, tool_choice)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

        logger.debug(f"AI provider request: model={self.model} messages={len(messages)} tools={len(payload.get('tools', []))}")
        try:
            resp = await self._client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise DeadlineExceededError("AI provider request timed out", e) from e
        except httpx.RequestError as e:
            raise TransportError("AI provider request failed", e) from e

        if self._log_responses:
            logger.debug(f"AI provider response {resp.status_code}: {resp.text[:2000]}")

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning(f"AI provider returned non-JSON body (HTTP {resp.status_code})")
            raise ProviderError(
                f"failed to decode AI provider response (HTTP {resp.status_code})",
                status_code=resp.status_code,
            ) from e

        if not isinstance(data, dict):
            raise ProviderError("unexpected AI provider response shape", status_code=resp.status_code)

        error = data.get("error")
        if error:
            detail = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(f"AI provider error (HTTP {resp.status_code}): {detail}")
            raise ProviderError(f"AI provider error: {detail}", status_code=resp.status_code)

        if resp.is_error:
            detail = data.get("message") or data.get("detail") or resp.reason_phrase
            logger.warning(f"AI provider error (HTTP {resp.status_code}): {detail}")
            raise ProviderError(f"AI provider error: {detail}", status_code=resp.status_code)

        choices = data.get("choices") or []
        if not isinstance(choices, list):
            raise ProviderError("unexpected AI provider response shape: choices is not a list", status_code=resp.status_code)
        if not choices:
            raise EmptyResponseError(status_code=resp.status_code)

        choice = choices[0]
        message = (choice.get("message") or {}) if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise ProviderError("unexpected AI provider response shape: choice message is not an object", status_code=resp.status_code)
        return message

    async def _process_tool_calls(self, tool_calls: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Execute each requested tool in order; any failure aborts the round."""
        results = []
        for call in tool_calls:
            function = call.get("function") if isinstance(call, dict) else None
            if not isinstance(function, dict):
                raise ProviderError("unexpected AI provider response shape: malformed tool call")
            name = function.get("name") or ""

            tool = self.tool_registry.get_tool(name)
            if tool is None:
                raise UnknownToolError(f"tool '{name}' not found in registry", tool_name=name)

            args = self._parse_arguments(name, function.get("arguments"))

            logger.info(f"Executing tool '{name}' (call {call.get('id', '')})")
            try:
                result = await tool.execute(args)
            except Exception as e:
                logger.warning(f"Tool '{name}' failed: {e}")
                raise ToolExecutionError(f"failed to execute tool '{name}'", tool_name=name, cause=e) from e

            results.append({
                "tool_call_id": call.get("id", ""),
                "name": name,
                "result": result,
            })
        return results

    @staticmethod
    def _parse_arguments(name: str, raw: Any) -> dict[str, Any]:
        if isinstance(raw, dict):
            return raw
        try:
            args = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise InvalidToolArgumentsError(f"failed to parse arguments for tool '{name}'", tool_name=name, cause=e) from e
        if not isinstance(args, dict):
            raise InvalidToolArgumentsError(f"arguments for tool '{name}' must be a JSON object", tool_name=name)
        return args

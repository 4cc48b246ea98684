from __future__ import annotations

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_openai import AzureChatOpenAI

from chatbot.core.prompt import build_messages
from chatbot.errors import ProviderError
from config.settings import Settings


logger = logging.getLogger("recipebot.agent")

MODEL_LABEL = "Azure OpenAI Chat"


def build_chat_model(settings: Settings) -> AzureChatOpenAI:
    settings.validate()

    logger.info(
        "Initializing Azure OpenAI: instance=%s deployment=%s api_version=%s key_set=%s",
        settings.azure_openai_instance_name,
        settings.azure_openai_deployment_name,
        settings.azure_openai_api_version,
        bool(settings.azure_openai_api_key),
    )

    llm = AzureChatOpenAI(
        azure_endpoint=settings.azure_openai_endpoint,
        api_key=settings.azure_openai_api_key,
        azure_deployment=settings.azure_openai_deployment_name,
        api_version=settings.azure_openai_api_version,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
    logger.info("Azure OpenAI chat model initialized")
    return llm


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Some providers return a list of content blocks.
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text") or ""))
        return "".join(parts)
    return ""


class RecipeChatClient:
    """Sends one system instruction plus one user message and returns the reply text.

    Every failure, including an empty reply, is raised as ``ProviderError``.
    Nothing is retried.
    """

    def __init__(self, llm: BaseChatModel, model_label: str = MODEL_LABEL) -> None:
        self.llm = llm
        self.model_label = model_label

    async def complete(self, system_instruction: str, user_message: str) -> str:
        messages = build_messages(user_message, system_instruction=system_instruction)
        try:
            result = await self.llm.ainvoke(messages)
        except Exception as exc:
            raise ProviderError(f"{self.model_label} call failed: {exc}") from exc

        text = _message_text(getattr(result, "content", None))
        if not text.strip():
            raise ProviderError(f"{self.model_label} returned an empty or malformed response")
        return text


def build_client(settings: Settings) -> RecipeChatClient:
    return RecipeChatClient(build_chat_model(settings))

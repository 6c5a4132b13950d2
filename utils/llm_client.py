"""Centralized LLM client wrapper for all agents."""

import os
import json
import logging
from typing import Optional, Dict, Any

import httpx

from .errors import LLMError

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    'mistral': "mistral-small-latest",
    'anthropic': "claude-sonnet-4-5-20250929",
    'gemini': "gemini-flash-latest",
}

API_KEY_NAMES = {
    'mistral': 'MISTRAL_API_KEY',
    'anthropic': 'ANTHROPIC_API_KEY',
    'gemini': 'GEMINI_API_KEY',
}


class LLMClient:
    """
    Centralized LLM client for making API calls.

    Supports multiple providers: 'mistral' (default, OpenAI-style chat
    completions over HTTP), 'anthropic' and 'gemini'.
    """

    @staticmethod
    def _get_secret(key):
        """Get secret from env vars or Streamlit secrets."""
        value = os.environ.get(key)
        if not value:
            try:
                import streamlit as st
                value = st.secrets.get(key)
            except Exception:
                pass
        return value

    def __init__(
        self,
        api_key: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        base_url: str = "https://api.mistral.ai/v1",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the chosen provider.
            provider: 'mistral', 'anthropic' or 'gemini'. Defaults to LLM_PROVIDER env var or 'mistral'.
            model: Model name. Defaults depend on provider.
            base_url: Chat-completions base URL for the mistral provider.
            http_client: Optional shared httpx client (tests pass one with a mock transport).
        """
        self.provider = (provider or os.environ.get('LLM_PROVIDER', 'mistral')).lower()
        if self.provider not in DEFAULT_MODELS:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")
        self.api_key = api_key or self._get_secret(API_KEY_NAMES[self.provider])
        self.model = model or DEFAULT_MODELS[self.provider]
        self.base_url = base_url.rstrip('/')
        self._http = http_client
        self._client = None

    @classmethod
    def from_config(cls, config) -> "LLMClient":
        return cls(
            api_key=config.llm_api_key,
            provider=config.llm_provider,
            model=config.llm_model,
            base_url=config.mistral_base_url,
        )

    @property
    def client(self):
        """SDK handle for the anthropic and gemini providers, created on first use."""
        if self._client is not None or self.provider == 'mistral':
            return self._client
        if not self.api_key:
            raise LLMError(self.provider, f"{API_KEY_NAMES[self.provider]} not set.")

        if self.provider == 'anthropic':
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        else:
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    def is_available(self) -> bool:
        """True when a key for the configured provider is present."""
        return bool(self.api_key)

    async def complete_async(
        self,
        prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.2,
        system: Optional[str] = None
    ) -> str:
        """
        Send one completion request and return the text content.

        Raises LLMError on any provider failure. There is no retry; callers
        bound the call with their own timeout.
        """
        try:
            if self.provider == 'gemini':
                return await self._complete_gemini_async(prompt, max_tokens, temperature, system)
            if self.provider == 'anthropic':
                return await self._complete_anthropic_async(prompt, max_tokens, temperature, system)
            return await self._complete_mistral_async(prompt, max_tokens, temperature, system)
        except LLMError:
            raise
        except httpx.HTTPError as e:
            raise LLMError(self.provider, f"HTTP error: {e}")
        except Exception as e:
            raise LLMError(self.provider, str(e))

    def build_chat_payload(self, prompt: str, max_tokens: int, temperature: float, system: Optional[str]) -> Dict[str, Any]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    async def _complete_mistral_async(self, prompt: str, max_tokens: int, temperature: float, system: Optional[str]) -> str:
        if not self.api_key:
            raise LLMError('mistral', "MISTRAL_API_KEY not set.")

        payload = self.build_chat_payload(prompt, max_tokens, temperature, system)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}/chat/completions"

        if self._http is not None:
            response = await self._http.post(url, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient() as http:
                response = await http.post(url, json=payload, headers=headers)

        if response.status_code < 200 or response.status_code >= 300:
            raise LLMError('mistral', f"API error: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError('mistral', f"Unexpected response shape: {e}")
        if not isinstance(content, str):
            raise LLMError('mistral', "Response content is not text")
        return content

    async def _complete_anthropic_async(self, prompt: str, max_tokens: int, temperature: float, system: Optional[str]) -> str:
        payload = self.build_chat_payload(prompt, max_tokens, temperature, system=None)
        if system:
            payload["system"] = system

        message = await self.client.messages.create(**payload)
        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
        if not text:
            raise LLMError('anthropic', "Response contained no text")
        return text

    async def _complete_gemini_async(self, prompt: str, max_tokens: int, temperature: float, system: Optional[str]) -> str:
        model = self.client.GenerativeModel(model_name=self.model, system_instruction=system or None)
        response = await model.generate_content_async(
            prompt,
            generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
        )
        try:
            return response.text
        except ValueError as e:
            # Raised when the candidate was blocked or came back empty
            raise LLMError('gemini', f"No text in response: {e}")

    @staticmethod
    def strip_code_fences(response_text: str) -> str:
        """Remove a surrounding markdown code block, if any."""
        cleaned_text = (response_text or "").strip()
        if "```json" in cleaned_text:
            cleaned_text = cleaned_text.split("```json")[1].split("```")[0]
        elif cleaned_text.startswith("```"):
            cleaned_text = cleaned_text.strip("`")
        return cleaned_text.strip()

    @staticmethod
    def parse_json_response(response_text: str) -> Any:
        """
        Parse JSON from an LLM response, handling code blocks.

        Returns None when the text is not JSON.
        """
        cleaned_text = LLMClient.strip_code_fences(response_text)
        try:
            return json.loads(cleaned_text)
        except json.JSONDecodeError as e:
            logger.debug("Error parsing JSON: %s\nOutput: %s...", e, (response_text or "")[:100])
            return None

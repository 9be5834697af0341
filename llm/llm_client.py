"""
This module provides a unified client for interacting with different Large Language Model (LLM) providers,
supporting both cloud-based (Google Gemini) and local (Ollama) LLMs. The provider is chosen once, when the
client is created, and every client exposes the same request/response interface.
"""
import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from google import genai
from google.genai import types

from models.generation_input import ScreenshotImage
from utils.exceptions import LLMError, MissingCredentialError, ServiceUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """
    A single request to the generation service.

    Attributes:
        instruction (str): The prompt text.
        image (Optional[ScreenshotImage]): Inline image to analyze, if any.
        response_schema (Optional[Dict[str, Any]]): Structured-output schema, for clients that support it.
    """
    instruction: str
    image: Optional[ScreenshotImage] = None
    response_schema: Optional[Dict[str, Any]] = None


# Abstract LLM Client Interface
class AbstractLLMClient(ABC):
    """
    Abstract base class for LLM clients.
    """

    @property
    @abstractmethod
    def supports_structured_output(self) -> bool:
        """Whether the service can be constrained to a response schema natively."""

    @abstractmethod
    def generate(self, request: GenerationRequest) -> str:
        """
        Sends the request to the LLM and returns the raw response text.

        Raises:
            ServiceUnavailableError: If the service cannot be reached, times out or returns an error.
        """


class CloudLLMClient(AbstractLLMClient):
    """
    LLM client for interacting with cloud-based Google Gemini models.
    """

    def __init__(self, api_key: Optional[str], model_name: str, vision_model_name: str,
                 temperature: float = 0.7, timeout_seconds: float = 120.0):
        """
        Initializes the CloudLLMClient.

        Args:
            api_key (Optional[str]): The API key for Google Gemini.
            model_name (str): Model used for text requirements (e.g. 'gemini-2.5-pro').
            vision_model_name (str): Model used for screenshots (e.g. 'gemini-2.5-flash').
            temperature (float): Generation temperature.
            timeout_seconds (float): Timeout for each API call.

        Raises:
            MissingCredentialError: If no API key is given.
        """
        if not api_key:
            raise MissingCredentialError("GEMINI_API_KEY is not set for 'cloud' LLM_PROVIDER.")
        self.model_name = model_name
        self.vision_model_name = vision_model_name
        self.temperature = temperature
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    @property
    def supports_structured_output(self) -> bool:
        return True

    def generate(self, request: GenerationRequest) -> str:
        contents = [request.instruction]
        model_name = self.model_name
        if request.image is not None:
            contents.append(types.Part.from_bytes(data=request.image.data, mime_type=request.image.mime_type))
            model_name = self.vision_model_name

        config_args = {"temperature": self.temperature}
        if request.response_schema is not None:
            config_args["response_mime_type"] = "application/json"
            config_args["response_schema"] = request.response_schema

        try:
            response = self.client.models.generate_content(
                model=model_name,
                contents=contents,
                config=types.GenerateContentConfig(**config_args),
            )
        except Exception as e:
            raise ServiceUnavailableError(f"Gemini API call failed: {e}") from e
        return (response.text or "").strip()


class LocalLLMClient(AbstractLLMClient):
    """
    LLM client for interacting with local LLM endpoints (Ollama chat API).
    """

    def __init__(self, endpoint: str, model_name: str, vision_model_name: str,
                 temperature: float = 0.7, timeout_seconds: float = 120.0):
        """
        Initializes the LocalLLMClient with the local LLM endpoint URL.

        Args:
            endpoint (str): The base URL of the Ollama server (e.g. 'http://localhost:11434').
            model_name (str): Model used for text requirements (e.g. 'gemma2:9b').
            vision_model_name (str): Model used for screenshots (e.g. 'llava').
            temperature (float): Generation temperature.
            timeout_seconds (float): Timeout for each HTTP request.
        """
        self.endpoint = str(endpoint).rstrip("/")
        self.model_name = model_name
        self.vision_model_name = vision_model_name
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    @property
    def supports_structured_output(self) -> bool:
        return False

    def generate(self, request: GenerationRequest) -> str:
        message = {"role": "user", "content": request.instruction}
        model_name = self.model_name
        if request.image is not None:
            message["images"] = [base64.b64encode(request.image.data).decode("ascii")]
            model_name = self.vision_model_name

        data = {
            "model": model_name,
            "messages": [message],
            "options": {"temperature": self.temperature},
            "stream": False,
        }
        try:
            response = requests.post(
                f"{self.endpoint}/api/chat",
                headers={"Content-Type": "application/json"},
                json=data,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            json_response = response.json()
        except requests.exceptions.RequestException as e:
            raise ServiceUnavailableError(f"Local LLM API call failed: {e}") from e
        except ValueError as e:
            raise ServiceUnavailableError(f"Local LLM returned a non-JSON response: {e}") from e

        try:
            return (json_response["message"]["content"] or "").strip()
        except (KeyError, TypeError) as e:
            raise ServiceUnavailableError(f"Unexpected response from local LLM: {json_response!r}") from e


def get_llm_client(config) -> AbstractLLMClient:
    """
    Factory function to get the appropriate LLM client based on `config.llm_provider`.

    Returns:
        AbstractLLMClient: An instance of either CloudLLMClient or LocalLLMClient.

    Raises:
        MissingCredentialError: If the cloud provider is selected without GEMINI_API_KEY.
        LLMError: If the provider is unsupported.
    """
    if config.llm_provider == "cloud":
        logger.info(f"Using Google Gemini (Cloud) LLM provider with model {config.cloud_model_name}.")
        return CloudLLMClient(
            api_key=config.gemini_api_key,
            model_name=config.cloud_model_name,
            vision_model_name=config.cloud_vision_model_name,
            temperature=config.gemini_temperature,
            timeout_seconds=config.llm_timeout_seconds,
        )
    elif config.llm_provider == "local":
        logger.info(f"Using Local LLM provider with endpoint: {config.local_llm_endpoint}")
        return LocalLLMClient(
            endpoint=str(config.local_llm_endpoint),
            model_name=config.local_model_name,
            vision_model_name=config.local_vision_model_name,
            temperature=config.gemini_temperature,
            timeout_seconds=config.llm_timeout_seconds,
        )
    else:
        raise LLMError(f"Unsupported LLM_PROVIDER: {config.llm_provider}. Must be 'cloud' or 'local'.")

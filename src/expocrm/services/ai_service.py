"""
AI Service

Thin wrapper over the LLM provider: completions, structured extraction,
image analysis and audio transcription.
"""
import json
import logging
import re
from typing import Any, List, Optional

from ..config import Config
from ..llm.providers.base import BaseLLMProvider, LLMMessage
from .exceptions import AIServiceError
from .prompt_cache import PromptCache

logger = logging.getLogger("expocrm.services.ai")

_FENCE_RE = re.compile(r"```[a-zA-Z]*\n?|\n?```")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z0-9_]+)\s*:")
_DATA_URL_RE = re.compile(r"^data:([^;]+);base64,")


def clean_and_parse_json(text: str) -> Any:
    """
    Parse JSON out of model output.

    Strips markdown fences, keeps the outermost {...} or [...] span and
    drops trailing commas. If that still fails, bare keys are quoted as a
    last attempt; the original error is raised when both fail.
    """
    clean = _FENCE_RE.sub("", text or "").strip()

    first_brace = clean.find("{")
    first_bracket = clean.find("[")
    if first_brace != -1 and (first_bracket == -1 or first_brace < first_bracket):
        start = first_brace
    else:
        start = first_bracket
    end = max(clean.rfind("}"), clean.rfind("]"))
    if start != -1 and end != -1 and end > start:
        clean = clean[start:end + 1]

    clean = _TRAILING_COMMA_RE.sub(r"\1", clean)

    try:
        return json.loads(clean)
    except json.JSONDecodeError as original:
        try:
            return json.loads(_BARE_KEY_RE.sub(r'\1"\2":', clean))
        except json.JSONDecodeError:
            raise original


def split_data_url(data: str, default_mime: str) -> tuple:
    """Split 'data:<mime>;base64,<payload>' into (mime, payload); plain base64 passes through"""
    match = _DATA_URL_RE.match(data)
    if match:
        return match.group(1), data[match.end():]
    return default_mime, data


class AIService:
    """Service for LLM calls"""

    def __init__(
        self,
        llm_provider: BaseLLMProvider,
        prompt_cache: Optional[PromptCache] = None,
    ):
        self.llm = llm_provider
        self.prompt_cache = prompt_cache

    async def generate_completion(
        self,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """
        Generate a completion.

        Raises:
            AIServiceError: If the provider reports a failure
        """
        response = await self.llm.generate(
            messages, model=model, temperature=temperature, max_tokens=max_tokens
        )
        if response.is_error:
            raise AIServiceError(response.content or "LLM request failed")
        return response.content

    async def complete(self, system: str, user: str, temperature: float = 0.7, max_tokens: int = 2048) -> str:
        """Single system + user turn"""
        return await self.generate_completion(
            [LLMMessage(role="system", content=system), LLMMessage(role="user", content=user)],
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def extract_structured_data(self, text: str, schema: str, example: Optional[str] = None) -> Any:
        """
        Extract JSON matching a schema description from free text.

        Raises:
            AIServiceError: On LLM failure or unparseable output
        """
        system = (
            f"You are a data extraction assistant. Extract information according to this schema: "
            f"{schema}. Return ONLY valid JSON, no additional text."
        )
        if example:
            system += f"\n\nExample output:\n{example}"

        response = await self.complete(system, text, temperature=0.3)
        try:
            return clean_and_parse_json(response)
        except json.JSONDecodeError:
            logger.error(f"Failed to parse AI response as JSON: {response[:500]}")
            raise AIServiceError("AI returned invalid JSON")

    async def analyze_image(self, image: str, prompt: str, schema: Optional[str] = None) -> Any:
        """
        Ask the vision model about an image (data URL or raw base64) and parse JSON.

        Raises:
            AIServiceError: On LLM failure or unparseable output
        """
        mime, payload = split_data_url(image, "image/jpeg")
        text = prompt
        if schema:
            text += f"\n\nReturn EXACTLY a JSON object matching this schema: {schema}"

        message = LLMMessage(role="user", content=[
            {"type": "text", "text": text},
            {"type": "image_url", "image_url": {"url": f"data:{mime};base64,{payload}"}},
        ])
        response = await self.generate_completion([message], model=Config.VISION_MODEL, temperature=0.2)
        try:
            return clean_and_parse_json(response)
        except json.JSONDecodeError:
            logger.error(f"Failed to parse AI image analysis response: {response[:500]}")
            raise AIServiceError("AI returned invalid JSON")

    async def transcribe_audio(self, audio: str, prompt: Optional[str] = None) -> str:
        """Transcribe audio (data URL or raw base64) with the audio model"""
        mime, payload = split_data_url(audio, "audio/webm")
        audio_format = mime.split("/")[-1].split(";")[0] or "webm"
        prompt = prompt or (
            "Please provide a high-quality transcript of this audio recording. "
            "Return ONLY the transcript text."
        )
        message = LLMMessage(role="user", content=[
            {"type": "text", "text": prompt},
            {"type": "input_audio", "input_audio": {"data": payload, "format": audio_format}},
        ])
        response = await self.generate_completion([message], model=Config.AUDIO_MODEL, temperature=0.0)
        return response.strip()

    def prompt(self, name: str, **values) -> str:
        """System prompt from the prompt cache"""
        return self.prompt_cache.render(name, **values)

    async def close(self):
        close = getattr(self.llm, "close", None)
        if close:
            await close()

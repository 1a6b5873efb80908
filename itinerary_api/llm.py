from typing import AsyncIterator, Callable, Optional

import google.generativeai as genai

from .errors import UpstreamError
from .prompts import SYSTEM_INSTRUCTION


# Any callable turning a prompt into a lazy, finite stream of text fragments.
FragmentSource = Callable[[str], AsyncIterator[str]]


class GeminiFragmentSource:
    def __init__(
        self,
        api_key: Optional[str],
        model_name: str,
        temperature: float = 0.7,
        timeout_sec: float = 120.0,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_sec = timeout_sec
        self._model: Optional[genai.GenerativeModel] = None
        if api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(
                model_name,
                system_instruction=SYSTEM_INSTRUCTION,
                generation_config={"temperature": temperature},
            )

    @property
    def configured(self) -> bool:
        return self._model is not None

    async def __call__(self, prompt: str) -> AsyncIterator[str]:
        if self._model is None:
            raise UpstreamError("GEMINI_API_KEY is not configured")
        try:
            response_stream = await self._model.generate_content_async(
                prompt,
                stream=True,
                request_options={"timeout": self.timeout_sec},
            )
            async for chunk in response_stream:
                text = getattr(chunk, "text", "") or ""
                if text:
                    yield text
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(f"Gemini request failed: {str(e)}") from e

# File: cv_tailor/llm/claude_client.py
import httpx
from typing import Optional
import logging

from cv_tailor.core.config import settings
from cv_tailor.core.exceptions import ClaudeAPIError

logger = logging.getLogger(__name__)

class ClaudeClient:
    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY not configured")

        self.api_key = api_key
        self.base_url = "https://api.anthropic.com/v1/messages"
        self.headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json"
        }
        self.model = model or settings.ANTHROPIC_MODEL
        self.max_tokens = max_tokens or settings.ANTHROPIC_MAX_TOKENS
        self.timeout = timeout or settings.ANTHROPIC_TIMEOUT_SECONDS
        logger.info(f"Initialized ClaudeClient with model: {self.model}")

    async def send_request(self, system_prompt: str, user_prompt: str) -> str:
        """Send a request to the Claude API and return the first text block."""
        logger.info(f"Sending request to Claude API with model: {self.model}")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.base_url,
                    headers=self.headers,
                    json={
                        "model": self.model,
                        "system": system_prompt,
                        "messages": [
                            {
                                "role": "user",
                                "content": user_prompt
                            }
                        ],
                        "max_tokens": self.max_tokens
                    },
                    timeout=self.timeout
                )

                if response.status_code != 200:
                    logger.error(f"API request failed with status code {response.status_code}: {response.text}")
                    raise ClaudeAPIError(
                        f"API request failed with status code {response.status_code}: {response.text}",
                        status_code=response.status_code,
                    )

                result = response.json()
                blocks = result.get("content") or [{}]
                content = blocks[0].get("text", "") if blocks[0].get("type", "text") == "text" else ""
                logger.info(f"Received response from Claude API (first 100 chars): {content[:100]}...")
                return content
        except httpx.HTTPError as e:
            logger.error(f"Error in Claude API request: {str(e)}")
            raise ClaudeAPIError(f"Claude API request failed: {e}") from e

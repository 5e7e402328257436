"""
MindStudio Question Provider

Fetches trivia questions from a MindStudio workflow that generates
one multiple choice question per run.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .base import QuestionSource
from ..errors import ErrorKind, TriviaError
from ..question import Question, parse_trivia_result

logger = logging.getLogger(__name__)


class MindStudioProvider(QuestionSource):
    """
    Question source backed by the MindStudio workflow runner.

    Configuration:
        api_url: Workflow run endpoint
        api_key: Bearer token (required by the service)
        app_id: MindStudio app identifier
        workflow: Workflow file to run (default: "NewportTrivia.flow")
        timeout: Request timeout in seconds (default: 30.0)

    Request body:
        {"appId": ..., "variables": {"input": <directive>}, "workflow": ...}

    Response envelope:
        {"success": true, "result": <question payload>}
    """

    DEFAULT_API_URL = "https://api.mindstudio.ai/developer/v2/apps/run"
    DEFAULT_WORKFLOW = "NewportTrivia.flow"
    DEFAULT_TIMEOUT = 30.0

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize MindStudio provider.

        Args:
            config: Provider configuration dictionary
        """
        config = config or {}
        self.api_url = config.get("api_url", self.DEFAULT_API_URL)
        self.api_key = config.get("api_key", "")
        self.app_id = config.get("app_id", "")
        self.workflow = config.get("workflow", self.DEFAULT_WORKFLOW)
        self.timeout = config.get("timeout", self.DEFAULT_TIMEOUT)

        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logging.getLogger(f"{__name__}.MindStudioProvider")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for API requests."""
        headers = {
            "Content-Type": "application/json",
        }

        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        return headers

    def _build_payload(self, directive: str) -> Dict[str, Any]:
        return {
            "appId": self.app_id,
            "variables": {"input": directive},
            "workflow": self.workflow,
        }

    async def fetch_question(self, directive: str) -> Question:
        """
        Run the workflow once and parse its result.

        Args:
            directive: Workflow input selecting first/next question

        Returns:
            Parsed Question

        Raises:
            TriviaError: INVALID_INPUT, TRANSPORT_FAILURE,
                BAD_SERVICE_RESPONSE or UNPARSABLE_CONTENT
        """
        if not directive:
            raise TriviaError("Input is required", ErrorKind.INVALID_INPUT)

        client = await self._get_client()

        self.logger.debug(f"Requesting question with directive {directive!r}")

        try:
            response = await client.post(
                self.api_url,
                json=self._build_payload(directive),
                headers=self._get_headers(),
            )
        except httpx.TimeoutException as e:
            raise TriviaError(
                f"Trivia service timed out after {self.timeout}s",
                ErrorKind.TRANSPORT_FAILURE,
                details={"message": str(e)},
            ) from e
        except httpx.RequestError as e:
            raise TriviaError(
                "Network error occurred",
                ErrorKind.TRANSPORT_FAILURE,
                details={"message": str(e)},
            ) from e

        if not response.is_success:
            raise TriviaError(
                f"API request failed with status {response.status_code}",
                ErrorKind.TRANSPORT_FAILURE,
                status_code=response.status_code,
                details={"status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TriviaError(
                "Response body is not valid JSON",
                ErrorKind.BAD_SERVICE_RESPONSE,
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict) or not data.get("success") or not data.get("result"):
            raise TriviaError(
                "Invalid response format from API",
                ErrorKind.BAD_SERVICE_RESPONSE,
                status_code=response.status_code,
                details=data,
            )

        question = parse_trivia_result(data["result"])
        self.logger.debug(f"Received question, answer {question.correct_answer}")
        return question

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

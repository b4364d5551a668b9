from typing import Any

import requests
from pydantic import ValidationError

from src.config import GameConfig
from src.shared.telemetry import Telemetry, measure_time
from src.trivia.domain.errors import NetworkError, ParseError, SemanticFetchError
from src.trivia.domain.models import Category, Difficulty, Question
from src.trivia.domain.ports import IQuestionSource

# Open Trivia DB reports semantic failures inside an HTTP 200 envelope.
RESPONSE_CODE_REASONS = {
    1: "No questions match the selected difficulty and category.",
    2: "The request contained an invalid parameter.",
    3: "Session token not found.",
    4: "Session token has returned all possible questions.",
    5: "Too many requests. Please wait a few seconds and try again.",
}


class OpenTDBQuestionSource(IQuestionSource):
    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str = GameConfig.API_BASE_URL,
        category_url: str = GameConfig.CATEGORY_API_URL,
        timeout: float = GameConfig.REQUEST_TIMEOUT,
    ) -> None:
        self.telemetry = Telemetry("OpenTDBClient")
        self.session = session or requests.Session()
        self.base_url = base_url
        self.category_url = category_url
        self.timeout = timeout

    @measure_time("fetch_categories")
    def fetch_categories(self) -> list[Category]:
        data = self._get_json(self.category_url)

        raw = data.get("trivia_categories")
        if not isinstance(raw, list):
            raise ParseError("Category list missing from response.")

        try:
            return [Category.model_validate(item) for item in raw]
        except ValidationError as e:
            raise ParseError(f"Malformed category entry: {e.error_count()} error(s)") from e

    @measure_time("fetch_questions")
    def fetch_questions(
        self,
        difficulty: Difficulty,
        category_id: int | None,
        amount: int = GameConfig.QUESTION_AMOUNT,
    ) -> list[Question]:
        params = self.build_params(difficulty, category_id, amount)
        data = self._get_json(self.base_url, params)

        code = data.get("response_code")
        if code != 0:
            reason = RESPONSE_CODE_REASONS.get(code, f"Unexpected response code {code}.")
            self.telemetry.log_warning("Semantic failure", response_code=code, params=params)
            raise SemanticFetchError(reason, response_code=code)

        raw = data.get("results")
        if not isinstance(raw, list):
            raise ParseError("Question list missing from response.")
        if not raw:
            raise SemanticFetchError("The service returned no questions.", response_code=code)

        try:
            questions = [Question.model_validate(item) for item in raw]
        except ValidationError as e:
            raise ParseError(f"Malformed question entry: {e.error_count()} error(s)") from e

        self.telemetry.log_info("Questions fetched", count=len(questions), params=params)
        return questions

    @staticmethod
    def build_params(
        difficulty: Difficulty, category_id: int | None, amount: int
    ) -> dict[str, Any]:
        """'Any' filters are expressed by leaving the parameter out."""
        params: dict[str, Any] = {"amount": amount, "type": GameConfig.QUESTION_TYPE}
        if difficulty != Difficulty.ANY:
            params["difficulty"] = difficulty.value
        if category_id is not None:
            params["category"] = category_id
        return params

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("Response is not valid JSON.") from e

        if not isinstance(data, dict):
            raise ParseError("Response is not a JSON object.")
        return data

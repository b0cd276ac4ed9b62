# app/analysis/extractor.py
import json
import re
from typing import Any, Dict

from app.core.exceptions import ExtractionFailed

# ```json ... ``` 형태의 코드 블록 표시
_FENCE_PATTERN = re.compile(r"```[a-zA-Z]*")


def _parse_object(text: str) -> Dict[str, Any]:
    document = json.loads(text)
    if not isinstance(document, dict):
        raise ValueError(f"최상위 값이 JSON 객체가 아닙니다: {type(document).__name__}")
    return document


def strip_wrapping(text: str) -> str:
    """
    코드 블록 표시를 제거하고 첫 '{'부터 마지막 '}'까지만 남깁니다.
    중괄호가 없으면 빈 문자열을 반환합니다.
    """
    unfenced = _FENCE_PATTERN.sub("", text)
    start = unfenced.find("{")
    end = unfenced.rfind("}")
    if start == -1 or end < start:
        return ""
    return unfenced[start:end + 1]


def extract_document(raw_text: str) -> Dict[str, Any]:
    """
    모델 응답 텍스트를 JSON 객체로 파싱합니다.

    1) 그대로 엄격하게 파싱
    2) 실패하면 감싸고 있는 텍스트를 걷어내고 딱 한 번 더 파싱
    3) 그래도 실패하면 ExtractionFailed

    :raises ExtractionFailed: 두 번의 시도가 모두 실패한 경우
    """
    if not raw_text or not raw_text.strip():
        raise ExtractionFailed("모델 응답이 비어 있습니다.")

    try:
        return _parse_object(raw_text)
    except ValueError:
        # json.JSONDecodeError는 ValueError의 하위 클래스
        pass

    repaired = strip_wrapping(raw_text)
    try:
        return _parse_object(repaired)
    except ValueError as e:
        raise ExtractionFailed(f"모델 응답을 JSON으로 해석할 수 없습니다: {e}") from e

# app/services/openai_service.py
import base64
import logging
from typing import List, Optional

import openai
from flask import Flask
from openai import OpenAI
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from app.analysis.types import RawModelResponse
from app.core.exceptions import UpstreamRejected, UpstreamUnavailable
from app.prompts.registry import PromptRegistry

# 결정적 응답을 위한 샘플링 설정
TEMPERATURE = 0.0


def _guess_mime_type(image_bytes: bytes) -> str:
    """매직 바이트로 이미지 MIME 타입을 추정합니다. 알 수 없으면 JPEG로 간주합니다."""
    if image_bytes.startswith(b'\x89PNG'):
        return 'image/png'
    if image_bytes[:4] == b'RIFF' and image_bytes[8:12] == b'WEBP':
        return 'image/webp'
    return 'image/jpeg'


def _to_data_url(image_bytes: bytes) -> str:
    encoded = base64.b64encode(image_bytes).decode('ascii')
    return f"data:{_guess_mime_type(image_bytes)};base64,{encoded}"


class OpenAIService:
    """
    OpenAI Vision API 연동을 담당하는 서비스 클래스 (Upstream Client).

    이미지 목록과 prompt_id를 받아 외부 모델을 한 번 호출하고 원본 텍스트를 반환합니다.
    - 네트워크 오류/타임아웃/5xx -> UpstreamUnavailable (1회 재시도)
    - 할당량/인증/정책 위반 등 4xx -> UpstreamRejected (재시도 없음)
    """

    def __init__(self):
        """
        OpenAI 클라이언트를 None으로 초기화합니다.
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
        """
        self.client: Optional[OpenAI] = None
        self.prompts: Optional[PromptRegistry] = None
        self.model = None
        self.max_tokens = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트와 프롬프트 레지스트리를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        # 재시도 횟수는 이 클래스에서 직접 관리하므로 SDK 자체 재시도는 끕니다.
        self.client = OpenAI(
            api_key=api_key,
            timeout=app.config['UPSTREAM_TIMEOUT_SECONDS'],
            max_retries=0
        )
        self.prompts = PromptRegistry(app.config['PROMPTS_DIR'])
        self.model = app.config['OPENAI_MODEL']
        self.max_tokens = app.config['OPENAI_MAX_TOKENS']
        logging.info(f"OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다. (model: {self.model})")

    def analyze_images(self, images: List[bytes], prompt_id: str, **variables) -> RawModelResponse:
        """
        순서가 있는 이미지 목록을 프롬프트와 함께 모델에 전달하고 원본 응답을 반환합니다.

        :param images: 이미지 바이트 목록 (비교 분석이면 [이전, 이후] 순서)
        :param prompt_id: 프롬프트 식별자 (예: 'body_analysis/v1')
        :param variables: 프롬프트 템플릿에 채울 값
        :return: RawModelResponse
        """
        if not self.client:
            raise RuntimeError("OpenAIService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        if not images:
            raise ValueError("분석할 이미지가 최소 1장 필요합니다.")

        prompt_text = self.prompts.render(prompt_id, **variables)
        content = [{"type": "text", "text": prompt_text}]
        for image_bytes in images:
            content.append({
                "type": "image_url",
                "image_url": {"url": _to_data_url(image_bytes)}
            })
        messages = [{"role": "user", "content": content}]

        retryer = Retrying(
            stop=stop_after_attempt(2),
            retry=retry_if_exception_type(UpstreamUnavailable),
            before_sleep=lambda state: logging.warning(
                f"Upstream 호출 실패, 재시도합니다 (prompt: {prompt_id}, attempt: {state.attempt_number})"
            ),
            reraise=True
        )
        text = retryer(self._call_once, messages)

        return RawModelResponse(
            text=text,
            model=self.model,
            prompt_id=prompt_id,
            temperature=TEMPERATURE
        )

    def _call_once(self, messages: list) -> str:
        """모델을 한 번 호출합니다. SDK 예외를 도메인 예외로 변환합니다."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=TEMPERATURE,
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens
            )
        except openai.APIConnectionError as e:
            # APITimeoutError 포함
            raise UpstreamUnavailable(f"AI 서비스에 연결할 수 없습니다: {type(e).__name__}") from e
        except openai.InternalServerError as e:
            raise UpstreamUnavailable(f"AI 서비스 내부 오류 (status: {e.status_code})") from e
        except openai.APIStatusError as e:
            raise UpstreamRejected(f"AI 서비스가 요청을 거부했습니다 (status: {e.status_code})") from e
        except openai.APIError as e:
            # 응답 형식 검증 실패 등 나머지 SDK 오류
            raise UpstreamRejected(f"AI 서비스 응답을 처리할 수 없습니다: {type(e).__name__}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

# app/prompts/registry.py
import logging
from pathlib import Path
from typing import Dict, Any

import yaml


class PromptNotFound(Exception):
    pass


class PromptRegistry:
    """
    버전이 붙은 프롬프트(YAML)를 읽고 렌더링합니다.

    프롬프트 문구는 파이프라인 로직과 별개로 관리되는 설정 데이터이며,
    'body_analysis/v1' 같은 prompt_id는 '<base_dir>/body_analysis/v1.yaml'에 대응합니다.
    """

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load(self, prompt_id: str) -> Dict[str, Any]:
        if prompt_id in self._cache:
            return self._cache[prompt_id]

        path = self.base_dir / f"{prompt_id}.yaml"
        if not path.exists():
            raise PromptNotFound(f"Prompt not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            prompt = yaml.safe_load(f) or {}

        if not prompt.get("template"):
            raise ValueError(f"Prompt template missing: {prompt_id}")

        self._cache[prompt_id] = prompt
        logging.info(f"PromptRegistry: '{prompt_id}' 로드 완료 (version: {prompt.get('version')})")
        return prompt

    def render(self, prompt_id: str, **variables) -> str:
        template = self.load(prompt_id)["template"]

        for key, value in variables.items():
            template = template.replace(f"{{{{ {key} }}}}", str(value))

        return template

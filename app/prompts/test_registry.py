# app/prompts/test_registry.py
import os

import pytest

from app.prompts.registry import PromptNotFound, PromptRegistry

PROMPTS_DIR = os.path.dirname(__file__)


def test_bundled_prompts_render_profile():
    registry = PromptRegistry(PROMPTS_DIR)
    for prompt_id in ("body_analysis/v1", "body_compare/v1"):
        text = registry.render(prompt_id, profile="키 170cm, 몸무게 65kg")
        assert "키 170cm, 몸무게 65kg" in text
        assert "{{ profile }}" not in text


def test_load_is_cached(tmp_path):
    (tmp_path / "demo").mkdir()
    path = tmp_path / "demo" / "v1.yaml"
    path.write_text("version: 1\ntemplate: 안녕하세요 {{ name }}\n", encoding="utf-8")
    registry = PromptRegistry(str(tmp_path))

    assert registry.render("demo/v1", name="홍길동") == "안녕하세요 홍길동"
    path.write_text("version: 2\ntemplate: 바뀐 내용\n", encoding="utf-8")
    assert registry.load("demo/v1")["version"] == 1


def test_unknown_prompt_raises(tmp_path):
    with pytest.raises(PromptNotFound):
        PromptRegistry(str(tmp_path)).load("missing/v1")


def test_template_is_required(tmp_path):
    (tmp_path / "empty.yaml").write_text("version: 1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        PromptRegistry(str(tmp_path)).load("empty")

"""LLM-backed pattern analyzer.

Renders entry records into a prompt, sends it through LLMRouter with the
active profile, and parses the JSON reply.
"""

import asyncio
import json
import re
import sys
from typing import Any

from llm_router import LLMRouter
from profile_manager import ProfileManager

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

RESPONSE_FORMAT = """응답 형식 (JSON):
{
  "summary": "사용자의 전반적인 생활 패턴과 감정 경향에 대한 다정한 요약 (2문장)",
  "patterns": [
    {
      "situation": "상황 키워드 (예: 친구와의 만남, 조용한 새벽)",
      "moodEmoji": "그 상황에서 주로 느끼는 감정의 이모지",
      "description": "상황과 감정의 연결 이유에 대한 짧은 설명"
    }
  ]
}"""


def build_prompt(records: list[dict[str, Any]]) -> str:
    """Render analysis records into the pattern prompt."""
    lines = []
    for r in records:
        nuance = f" ({', '.join(r['nuance_labels'])})" if r.get("nuance_labels") else ""
        lines.append(f"- [{r['glyph']} {r['label']}]{nuance} 상황/메모: {r.get('note', '')}")

    return (
        "사용자의 메모들을 분석하여 특정 상황이나 키워드와 감정 사이의 상관관계를 찾아내세요.\n"
        "예를 들어 \"커피를 마실 때 주로 즐거워함\", \"회사 업무 이야기가 나올 때 불안해함\" "
        "같은 패턴을 3개 정도 추출하세요.\n\n"
        "기록 리스트:\n"
        + "\n".join(lines)
        + "\n\n"
        + RESPONSE_FORMAT
    )


def extract_json(text: str) -> dict[str, Any]:
    """Parse the JSON object in an LLM reply.

    Accepts a bare object, one wrapped in a Markdown code fence, or one
    surrounded by extra prose.

    Raises:
        ValueError: If no JSON object can be parsed.
    """
    cleaned = _FENCE.sub("", (text or "").strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object in analysis response") from None
        try:
            data = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in analysis response: {e}") from None

    if not isinstance(data, dict):
        raise ValueError("Analysis response is not a JSON object")
    return data


class LLMPatternAnalyzer:
    """PatternAnalyzer that asks the active profile's LLM."""

    def __init__(self, router: LLMRouter | None = None, profiles: ProfileManager | None = None):
        self.router = router or LLMRouter()
        self.profiles = profiles or ProfileManager()

    def analyze_sync(self, records: list[dict[str, Any]]) -> dict[str, Any]:
        profile = self.profiles.get_current()
        print(f"Analyzing {len(records)} entries with profile '{profile.get('name')}'...", file=sys.stderr)

        reply = self.router.chat_json(
            llm_config=profile["llm"],
            messages=[{"role": "user", "content": build_prompt(records)}],
            system_prompt=profile["system_prompt"],
        )
        return extract_json(reply)

    async def analyze(self, records: list[dict[str, Any]]) -> dict[str, Any]:
        """Run the blocking LLM call in a worker thread."""
        return await asyncio.to_thread(self.analyze_sync, records)

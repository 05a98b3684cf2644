import pytest

from conftest import FakeModel
from startup_valuation.services.calculator import compute
from startup_valuation.services.explanations import (
    ExplanationGenerator,
    explanation_prompt,
    extract_bullets,
)


class TestExtractBullets:

    def test_keeps_marked_lines_only(self):
        text = "Intro line\n• first\n- second\nnot a bullet\n* third\n"
        assert extract_bullets(text) == ["first", "second", "third"]

    def test_caps_at_three(self):
        text = "\n".join(f"- point {i}" for i in range(5))
        assert extract_bullets(text) == ["point 0", "point 1", "point 2"]

    def test_fewer_lines_are_not_padded(self):
        assert extract_bullets("•   only one  \nplain") == ["only one"]
        assert extract_bullets("no bullets at all") == []

    def test_indented_markers(self):
        assert extract_bullets("   - indented\n\t* tabbed") == ["indented", "tabbed"]


@pytest.mark.asyncio
async def test_bullets_call_is_not_grounded(snapshot):
    model = FakeModel()
    valuation = compute(snapshot.revenue, snapshot.multiple_set)

    bullets = await ExplanationGenerator(model).bullets(snapshot, valuation)

    assert len(bullets) == 3
    [(prompt, was_grounded)] = model.calls
    assert was_grounded is False
    assert "Write exactly 3 concise bullet points" in prompt


@pytest.mark.asyncio
async def test_reply_is_trimmed_and_mentions_message(snapshot):
    model = FakeModel(text="  Your valuation is now ₹10.0 Cr.  \n")
    valuation = compute(snapshot.revenue, snapshot.multiple_set)

    reply = await ExplanationGenerator(model).reply("use 9x", snapshot, valuation)

    assert reply == "Your valuation is now ₹10.0 Cr."
    assert 'User said: "use 9x"' in model.calls[0][0]


def test_explanation_prompt_uses_default_band(bare_snapshot):
    valuation = compute(bare_snapshot.revenue, bare_snapshot.multiple_set)
    prompt = explanation_prompt(bare_snapshot, valuation)
    assert "10.0× (range 8.0×-12.0×)" in prompt
    assert "₹1.0 Cr" in prompt

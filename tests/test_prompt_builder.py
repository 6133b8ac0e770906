# ===============================================
# tests/test_prompt_builder.py
# Message sequencing for both contracts
# ===============================================
import json

from formgen.generate import Message, TextPart, ImagePart
from formgen.generate.prompt_builder import (
    build_custom_component_prompt,
    build_form_prompt,
    history_to_messages,
    image_url,
)
from formgen.generate.prompts import (
    CUSTOM_COMPONENT_SYSTEM_PROMPT,
    DEFAULT_IMAGE_PROMPT,
    IMAGE_ANALYSIS_CLAUSE,
    load_few_shot_examples,
)


def roles(messages):
    return [m.role for m in messages]


def test_text_prompt_has_system_examples_and_user_turn():
    messages = build_form_prompt("make a login form")
    examples = load_few_shot_examples()
    assert len(examples) == 3
    assert roles(messages) == ["system"] + ["user", "assistant"] * 3 + ["user"]
    assert IMAGE_ANALYSIS_CLAUSE not in messages[0].content
    assert messages[-1].kind == "text"
    assert messages[-1].content == "make a login form"


def test_few_shot_assistant_turns_are_schema_json():
    messages = build_form_prompt("x")
    first_reply = json.loads(messages[2].content)
    assert first_reply["schema"]["title"] == "Contact Form"
    assert first_reply["css"] is None
    assert messages[1].content.startswith("Create a contact form")


def test_history_is_appended_verbatim_before_user_turn():
    history = [
        {"role": "user", "content": "contact form"},
        {"role": "assistant", "content": '{"schema": {}}'},
    ]
    messages = build_form_prompt("add a phone field", history=history)
    assert [(m.role, m.content) for m in messages[-3:-1]] == [("user", "contact form"), ("assistant", '{"schema": {}}')]
    assert messages[-1].content == "add a phone field"


def test_image_prompt_skips_examples_and_uses_parts():
    messages = build_form_prompt("", image="QUJD")
    assert roles(messages) == ["system", "user"]
    assert messages[0].content.endswith(IMAGE_ANALYSIS_CLAUSE)

    last = messages[-1]
    assert last.kind == "parts"
    assert [p.type for p in last.parts] == ["text", "image_url"]
    assert last.parts[0].text == DEFAULT_IMAGE_PROMPT
    assert last.parts[1].url == "data:image/png;base64,QUJD"
    assert last.to_openai()["content"][1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,QUJD"}}


def test_image_prompt_keeps_user_text():
    messages = build_form_prompt("copy this form", image="data:image/jpeg;base64,QUJD")
    assert messages[-1].parts[0].text == "copy this form"
    assert messages[-1].parts[1].url == "data:image/jpeg;base64,QUJD"


def test_image_url_passthrough():
    assert image_url("https://example.com/form.png") == "https://example.com/form.png"
    assert image_url("  data:image/png;base64,AA ") == "data:image/png;base64,AA"


def test_history_images_are_dropped():
    history = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "earlier form"},
                {"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}},
            ],
        },
        Message(role="assistant", content="ok"),
    ]
    converted = history_to_messages(history)
    assert not any(m.has_image for m in converted)
    assert converted[0].parts == [TextPart(text="earlier form")]
    assert converted[1].content == "ok"


def test_image_only_history_turn_is_skipped():
    history = [
        {"role": "user", "content": [{"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}}]},
        {"role": "assistant", "content": "done"},
    ]
    converted = history_to_messages(history)
    assert [(m.role, m.content) for m in converted] == [("assistant", "done")]


def test_only_final_turn_carries_an_image():
    history = [Message(role="user", parts=[TextPart(text="old"), ImagePart(url="http://x/img.png")])]
    messages = build_form_prompt("new", history=history, image="QUJD")
    assert [m.has_image for m in messages] == [False, False, True]


def test_custom_component_prompt():
    history = [{"role": "user", "content": "make a rating component"}]
    messages = build_custom_component_prompt("now with 10 stars", history=history)
    assert roles(messages) == ["system", "user", "user"]
    assert messages[0].content == CUSTOM_COMPONENT_SYSTEM_PROMPT
    assert messages[-1].content == "now with 10 stars"

# ===============================================
# tests/test_generator.py
# Orchestration: AI path, fallback path, custom components
# ===============================================
import asyncio
import json

import pytest

from formgen.forms import FormGenerator
from formgen.generate import ModelInvoker
from formgen.generate.errors import AuthError, ExhaustedRetries, ExtractionError, NotConfigured

CONTACT_REQUEST = "create a contact form with name, email, phone, and message, all required"

AI_REPLY = {
    "schema": {
        "display": "form",
        "title": "Login",
        "components": [
            {"type": "email", "key": "email", "label": "Email", "input": True},
            {"type": "password", "key": "password", "label": "Password", "input": True},
        ],
    },
    "css": ".form-control { border-radius: 8px; }",
}


class Unconfigured:
    model = "none"
    configured = False

    async def generate(self, messages, params):
        raise AssertionError("must not be called")


def run(coro):
    return asyncio.run(coro)


def test_ai_path_returns_validated_schema_and_css(make_invoker):
    gen = FormGenerator(make_invoker(script=["```json\n" + json.dumps(AI_REPLY) + "\n```"]))
    result = run(gen.generate_form("login form"))
    assert result.source == "ai"
    assert result.model == "text-model"
    assert result.css == ".form-control { border-radius: 8px; }"
    assert [c.key for c in result.schema.components] == ["email", "password", "submit"]
    assert result.schema.title == "Login"


def test_ai_path_accepts_bare_schema_with_prose(make_invoker):
    reply = "Here's the form: " + json.dumps(AI_REPLY["schema"]) + " Enjoy!"
    result = run(FormGenerator(make_invoker(script=[reply])).generate_form("login form"))
    assert result.source == "ai"
    assert result.css is None
    assert result.schema.components[0].key == "email"


@pytest.mark.parametrize("css", [None, "", 12])
def test_css_only_passed_through_when_text(make_invoker, css):
    reply = dict(AI_REPLY, css=css)
    result = run(FormGenerator(make_invoker(script=[json.dumps(reply)])).generate_form("login"))
    assert result.css is None


def test_image_request_uses_vision_model(make_invoker):
    invoker = make_invoker(script=[json.dumps(AI_REPLY)])
    result = run(FormGenerator(invoker).generate_form("", image="QUJD"))
    assert result.model == "vision-model"
    _, params = invoker.client.calls[0]
    assert params.model == "vision-model"


def test_exhausted_retries_fall_back_to_keywords(make_invoker, sleeper):
    invoker = make_invoker(script=[RuntimeError("503"), RuntimeError("503"), RuntimeError("503 again")])
    result = run(FormGenerator(invoker).generate_form(CONTACT_REQUEST))
    assert result.source == "fallback"
    assert result.css is None
    assert result.schema.title == "Contact Form"
    assert [c.key for c in result.schema.components] == ["name", "email", "phone", "message", "submit"]
    assert len(invoker.client.calls) == 3


def test_ai_path_error_is_aggregate(make_invoker):
    invoker = make_invoker(script=[RuntimeError("a"), RuntimeError("b"), RuntimeError("final boom")])
    with pytest.raises(ExhaustedRetries, match="final boom"):
        run(FormGenerator(invoker).generate_with_ai("x"))


def test_auth_error_falls_back_after_one_call(make_invoker):
    invoker = make_invoker(script=[RuntimeError("Invalid API Key")])
    result = run(FormGenerator(invoker).generate_form("feedback form with comment"))
    assert result.source == "fallback"
    assert result.schema.title == "Feedback Form"
    assert len(invoker.client.calls) == 1


@pytest.mark.parametrize(
    "reply",
    [
        "I'm sorry, I can't do that.",
        '{"schema": {"components": [{"type": "scriptInjector", "key": "x", "label": "X"}]}}',
        '{"schema": {"components": []}}',
        "{not json}",
    ],
)
def test_unusable_reply_falls_back(make_invoker, reply):
    result = run(FormGenerator(make_invoker(script=[reply])).generate_form(CONTACT_REQUEST))
    assert result.source == "fallback"
    assert result.schema.title == "Contact Form"


def test_deeply_nested_reply_falls_back(make_invoker):
    reply = '{"schema": {"components": ' + "[" * 200000 + "]" * 200000 + "}}"
    result = run(FormGenerator(make_invoker(script=[reply])).generate_form(CONTACT_REQUEST))
    assert result.source == "fallback"
    assert result.schema.title == "Contact Form"


class BrokenValidator:
    def validate_payload(self, payload):
        raise RuntimeError("boom")


def test_unexpected_error_falls_back(make_invoker):
    reply = json.dumps(AI_REPLY)
    gen = FormGenerator(make_invoker(script=[reply]), validator=BrokenValidator())
    result = run(gen.generate_form(CONTACT_REQUEST))
    assert result.source == "fallback"


def test_non_json_reply_is_extraction_error(make_invoker):
    with pytest.raises(ExtractionError):
        run(FormGenerator(make_invoker(script=["no braces here"])).generate_with_ai("x"))


def test_not_configured_goes_straight_to_fallback():
    gen = FormGenerator(ModelInvoker(Unconfigured()))
    result = run(gen.generate_form(CONTACT_REQUEST))
    assert result.source == "fallback"
    assert len(result.schema.components) == 5


def test_echo_client_default_reply_round_trips(make_invoker):
    result = run(FormGenerator(make_invoker()).generate_form("hello there"))
    assert result.source == "ai"
    assert result.schema.components[0].label == "hello there"


def test_custom_component_success(make_invoker):
    reply = json.dumps({"componentCode": "export default class Rating {}", "templateCode": "const T = 1\\nexport default T"})
    result = run(FormGenerator(make_invoker(script=[reply])).generate_custom_component("rating component"))
    assert result.component_code == "export default class Rating {}"
    assert result.template_code == "const T = 1\nexport default T"


def test_custom_component_requires_configuration():
    with pytest.raises(NotConfigured):
        run(FormGenerator(ModelInvoker(Unconfigured())).generate_custom_component("x"))


def test_custom_component_errors_reach_caller(make_invoker):
    with pytest.raises(AuthError):
        run(FormGenerator(make_invoker(script=[RuntimeError("403 Forbidden")])).generate_custom_component("x"))
    with pytest.raises(ExtractionError):
        run(FormGenerator(make_invoker(script=["just prose"])).generate_custom_component("x"))


def test_results_are_independent_between_calls(make_invoker):
    gen = FormGenerator(make_invoker(script=[json.dumps(AI_REPLY), json.dumps(AI_REPLY)]))
    first = run(gen.generate_form("a"))
    first.schema.components.clear()
    second = run(gen.generate_form("b"))
    assert len(second.schema.components) == 3

# ============================================================
# Form Generator FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Groq (OpenAI-compatible) or Echo model client
#   - ModelInvoker (retry / timeout / vision model selection)
#   - FormGenerator (AI path with keyword fallback)
# ============================================================

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any, Literal, Union
import logging
import time

# --- Local imports ---
from formgen.settings import settings
from formgen.forms import FormGenerator
from formgen.generate import ModelInvoker
from formgen.generate.errors import FormGenError, GenerationTimeout, ExhaustedRetries, NotConfigured
from formgen.generate.clients.echo_dev_client import EchoDevClient

# ------------------------------------------------------------
# 📝 Logging
# ------------------------------------------------------------
logger = logging.getLogger("formgen")
if not logger.handlers:
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
    logger.addHandler(h)
logger.setLevel(settings.LOG_LEVEL.upper())

# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
if settings.USE_ECHO:
    model_client = EchoDevClient()
else:
    from formgen.generate.clients.openai_client import OpenAIClient
    model_client = OpenAIClient(
        api_key=settings.GROQ_API_KEY,
        model=settings.GROQ_MODEL,
        base_url=settings.GROQ_BASE_URL,
    )

invoker = ModelInvoker.from_settings(settings, model_client)
form_generator = FormGenerator(invoker=invoker)

if not form_generator.is_configured():
    logger.warning(
        "GROQ_API_KEY not configured! Forms will be generated with keyword matching. "
        "Get a key from https://console.groq.com/keys"
    )
else:
    logger.info("Initialized form generator with model: %s", invoker.default_model)

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="Form Generator API", version="0.1")

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ImageUrl(BaseModel):
    url: str

class ContentPart(BaseModel):
    type: Literal["text", "image_url"]
    text: Optional[str] = None
    image_url: Optional[ImageUrl] = None

class ChatTurn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: Union[str, List[ContentPart]]

class ChatRequest(BaseModel):
    message: str
    image: Optional[str] = None
    conversationHistory: Optional[List[ChatTurn]] = None

class SimpleMessage(BaseModel):
    message: str

class ChatReply(BaseModel):
    message: str
    success: bool

class FormPayload(BaseModel):
    formSchema: Optional[Dict[str, Any]]
    css: Optional[str] = None
    message: str
    success: bool
    metadata: Dict[str, Any] = Field(default_factory=dict)

class CustomComponentPayload(BaseModel):
    componentCode: Optional[str]
    templateCode: Optional[str]
    message: str
    success: bool
    metadata: Dict[str, Any] = Field(default_factory=dict)

# ------------------------------------------------------------
# 💬 Conversational route (canned replies, no LLM)
# ------------------------------------------------------------
GREETINGS = {"hello", "hi", "hey", "good morning", "good afternoon", "good evening"}
HELP_WORDS = ("help", "what can you do", "how does this work")

GREETING_REPLY = (
    "Hello! I can help you generate forms. Here's how:\n\n"
    '• Type "create a form" followed by your requirements\n'
    "• Upload an image of a form\n"
    '• Example: "create a contact form with name, email, and message"\n\n'
    "What would you like to create?"
)
HELP_REPLY = (
    "I can generate Form.io schemas from your descriptions! Here's how:\n\n"
    "Create from text:\n"
    '  • "create a contact form with name, email, phone"\n'
    '  • "create a registration form with username and password"\n\n'
    "Create from image:\n"
    "  Upload a screenshot or photo of any form."
)
DEFAULT_REPLY = (
    "I'm here to help you create forms! To get started:\n\n"
    '• Say "create a form" and describe what you need\n'
    "• Or upload an image of a form\n\n"
    'Try saying: "create a contact form"'
)

@app.post("/chat/message", response_model=ChatReply)
def chat_message(req: SimpleMessage):
    text = req.message.lower().strip()
    if text in GREETINGS:
        return ChatReply(message=GREETING_REPLY, success=True)
    if any(w in text for w in HELP_WORDS):
        return ChatReply(message=HELP_REPLY, success=True)
    return ChatReply(message=DEFAULT_REPLY, success=True)

# ------------------------------------------------------------
# 🧾 Form generation
# ------------------------------------------------------------
def _history(req: ChatRequest) -> List[Dict[str, Any]]:
    return [t.model_dump(exclude_none=True) for t in (req.conversationHistory or [])]

def _is_timeout(e: Exception) -> bool:
    if isinstance(e, GenerationTimeout):
        return True
    return isinstance(e, ExhaustedRetries) and isinstance(e.last_error, GenerationTimeout)

@app.post("/chat/generate-form", response_model=FormPayload)
async def generate_form(req: ChatRequest):
    start = time.monotonic()
    logger.info('Generating form for message: "%s..."', req.message[:50])

    # never raises for FormGenError: the keyword fallback is total
    result = await form_generator.generate_form(req.message, _history(req), req.image)

    duration = int((time.monotonic() - start) * 1000)
    logger.info("Form generated successfully in %dms (%s)", duration, result.source)
    return FormPayload(
        formSchema=result.schema.to_dict(),
        css=result.css,
        message="Form generated successfully",
        success=True,
        metadata={
            "generationTime": duration,
            "componentCount": len(result.schema.components),
            "model": result.model,
            "source": result.source,
        },
    )

@app.post("/chat/generate-custom-component", response_model=CustomComponentPayload)
async def generate_custom_component(req: ChatRequest):
    start = time.monotonic()
    logger.info('Generating custom component for message: "%s..."', req.message[:50])
    try:
        result = await form_generator.generate_custom_component(req.message, _history(req))
    except FormGenError as e:
        duration = int((time.monotonic() - start) * 1000)
        logger.error("Custom component generation failed after %dms: %s", duration, e)
        if isinstance(e, NotConfigured):
            status = 503
        elif _is_timeout(e):
            status = 408
        else:
            status = 500
        raise HTTPException(
            status_code=status,
            detail={
                "componentCode": None,
                "templateCode": None,
                "message": f"Failed to generate custom component: {e}",
                "success": False,
            },
        )

    duration = int((time.monotonic() - start) * 1000)
    logger.info("Custom component generated successfully in %dms", duration)
    return CustomComponentPayload(
        **result.to_dict(),
        message="Custom component generated successfully",
        success=True,
        metadata={"generationTime": duration},
    )

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
        "llm_configured": form_generator.is_configured(),
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": "Form Generator service running."}

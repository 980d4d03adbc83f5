"""
Thin wrapper around the Anthropic Messages API.

Each call sends one user message: the captioned images followed by the
prompt, and expects a single JSON object matching the flow's output model.
"""

import json
import logging
import time

import anthropic
from flask import current_app
from pydantic import ValidationError

from utils.errors import ModelResponseError, ModelUnavailableError
from utils.media import image_block

logger = logging.getLogger(__name__)

JSON_INSTRUCTIONS = """

Reply with ONLY a JSON object (no markdown, no explanation) that matches this JSON schema:
{schema}"""


def _strip_fences(text):
    text = text.strip()
    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else len(text)
        text = text[first_nl + 1:]
        if text.endswith("```"):
            text = text[:-3]
    return text.strip()


def run_prompt(prompt, images, output_model, label="flow"):
    """Send prompt + images to the model and parse the reply into output_model.

    images is a list of (caption, photo_reference) pairs.
    """
    api_key = current_app.config.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise ModelUnavailableError("ANTHROPIC_API_KEY is not configured; face verification is unavailable.")

    content = []
    for caption, photo_ref in images:
        content.append({"type": "text", "text": caption})
        content.append(image_block(photo_ref))
    schema = json.dumps(output_model.model_json_schema())
    content.append({"type": "text", "text": prompt + JSON_INSTRUCTIONS.format(schema=schema)})

    model = current_app.config["VISION_MODEL"]
    client = anthropic.Anthropic(api_key=api_key)
    t0 = time.time()
    try:
        msg = client.messages.create(
            model=model,
            max_tokens=current_app.config["VISION_MAX_TOKENS"],
            messages=[{"role": "user", "content": content}],
        )
    except anthropic.APIError as e:
        logger.error("[%s] model call failed: %s", label, e)
        raise ModelUnavailableError(f"The verification service is unavailable: {e}") from e

    text = "".join(block.text for block in msg.content if block.type == "text")
    logger.info("[%s] %s replied in %dms", label, model, round((time.time() - t0) * 1000))

    try:
        return output_model.model_validate_json(_strip_fences(text))
    except ValidationError as e:
        logger.error("[%s] unparsable reply: %r", label, text[:500])
        raise ModelResponseError("The verification service returned an invalid response.") from e

"""System prompts and message builders for both pipeline stages.

Every upstream call uses the same fixed shape: exactly one ``system`` message
carrying the task instructions, followed by exactly one ``user`` message
carrying the payload.  The builders in this module are the only place that
shape is assembled.

Extraction Prompts
------------------
Two constant prompts, chosen by the caller through :class:`ExtractionMode`:

- ``UI_STRUCTURE`` - describe layout, components, verbatim text, styling and
  interactions, for downstream HTML generation;
- ``FACTS`` - objectively list everything visible without interpretation,
  for downstream question answering.

The user message for extraction is multimodal: a short task-framing text part
followed by an ``image_url`` part holding the data URI.

Synthesis Prompts
-----------------
Three text-only prompt families:

- code synthesis (single self-contained HTML document, themed),
- answer synthesis (answer a question from a description, or summarise it),
- Mermaid diagram synthesis (text-to-diagram).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

DEFAULT_THEME = "light"
NO_EXTRA_TEXT = "no additional text"


class ExtractionMode(str, Enum):
    """Which kind of description the vision model should produce."""

    UI_STRUCTURE = "ui_structure"
    FACTS = "facts"


# ---------------------------------------------------------------------------
# Extraction stage.
# ---------------------------------------------------------------------------

_UI_STRUCTURE_SYSTEM = """You are a professional UI/UX design analyst. Your task is to study the user interface shown in the image and describe it in detail.

Structure your description as follows:
1. Overall layout: the page structure and how regions are arranged
2. Components: every visible UI component (buttons, inputs, text, images, etc.)
3. Text content: an exact transcription of all text
4. Visual style: colours, fonts, spacing, sizes
5. Interactions: clickable, editable or otherwise interactive elements

Be as detailed and accurate as possible."""

_UI_STRUCTURE_USER = "Analyse this UI design or wireframe and provide a detailed description of its content."

_FACTS_SYSTEM = """You are a precise image content extraction tool. Your task is to objectively extract and describe everything visible in the image so that later questions can be answered from your description.

Extraction rules:
1. Objective: describe what you see, do not analyse or interpret
2. Complete: cover all text, images, layout, colours and other visual elements
3. Exact: transcribe all text accurately
4. Structured: organise the description in a logical order
5. Detailed: leave out nothing that could help answer a question

Focus on factual description rather than evaluation."""

_FACTS_USER = (
    "Extract all content from this image, including text, layout and visual elements, "
    "as an accurate basis for answering questions later."
)

_EXTRACTION_PROMPTS: dict[ExtractionMode, tuple[str, str]] = {
    ExtractionMode.UI_STRUCTURE: (_UI_STRUCTURE_SYSTEM, _UI_STRUCTURE_USER),
    ExtractionMode.FACTS: (_FACTS_SYSTEM, _FACTS_USER),
}


def build_extraction_messages(image: str, mode: ExtractionMode) -> list[dict[str, Any]]:
    """Build the multimodal message pair for the vision model.

    Args:
        image: Data URI of the uploaded image, passed through untouched.
        mode: Which extraction prompt to use.

    Returns:
        ``[system, user]`` where the user content is ``[text part, image part]``.
    """
    system_prompt, task_text = _EXTRACTION_PROMPTS[ExtractionMode(mode)]
    return [
        {"role": "system", "content": system_prompt},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": task_text},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        },
    ]


# ---------------------------------------------------------------------------
# Synthesis stage.
# ---------------------------------------------------------------------------

_CODE_SYSTEM = """You are a professional front-end engineer. Generate modern, responsive HTML/CSS from a UI design description.

Requirements:
1. Produce one complete, self-contained HTML document with inline CSS
2. Use modern CSS features (Flexbox, Grid, CSS variables)
3. Make the layout responsive and mobile friendly
4. Use semantic HTML5 elements
5. Apply styling appropriate to the theme: {theme}
6. Incorporate these text elements accurately where they belong: {texts}
7. Keep the code clean and production ready
8. Return only the HTML code, with no explanation and no Markdown formatting

Reproduce the described design as faithfully as possible."""

_CODE_USER = """Generate modern HTML/CSS code for the following design description:

{description}

Make sure the result is responsive, visually polished and easy to use."""

_ANSWER_SYSTEM = """You are a helpful assistant that answers questions about an image. You receive a detailed description of the image content and must answer the user's question based on it.

Answering rules:
1. Grounded: rely strictly on the supplied description
2. Focused: answer the specific question directly, without filler
3. Concise: clear language, clear logic, key points first
4. Reliable: never add information that is not in the description
5. Natural: write fluent, natural prose
6. Useful: give the user practically helpful information

Your task is to answer the question, not to describe the image."""

_ANSWER_USER_WITH_QUESTION = """Image content: {description}

Please answer: {question}"""

_ANSWER_USER_SUMMARY = """Image content: {description}

Please provide relevant insights or a summary based on the image content."""

_DIAGRAM_SYSTEM = """You are an expert at creating Mermaid diagrams. Convert user descriptions into valid Mermaid diagram code.

Rules:
1. Only return the Mermaid code, no explanations or markdown formatting
2. Use appropriate Mermaid diagram types (flowchart, sequence, class, etc.)
3. Keep node IDs simple and without special characters
4. Ensure the diagram is syntactically correct
5. For flowcharts, use TD (top-down) direction by default
6. Make the diagram clear and well-structured

Examples:
- For processes: use flowchart TD
- For user interactions: use sequence diagram
- For system architecture: use flowchart or C4 diagram
- For data models: use class diagram or ER diagram"""


def build_code_messages(
    description: str,
    texts: str | None = None,
    theme: str | None = None,
) -> list[dict[str, str]]:
    """Build the code-synthesis message pair.

    Args:
        description: The assembled content description.
        texts: Literal user text to embed in the page, if any.
        theme: Visual theme hint; defaults to ``"light"``.

    Returns:
        ``[system, user]`` with plain-text content.
    """
    return [
        {
            "role": "system",
            "content": _CODE_SYSTEM.format(
                theme=theme or DEFAULT_THEME,
                texts=texts or NO_EXTRA_TEXT,
            ),
        },
        {"role": "user", "content": _CODE_USER.format(description=description)},
    ]


def build_answer_messages(description: str, question: str | None = None) -> list[dict[str, str]]:
    """Build the answer-synthesis message pair.

    Without a question the model is asked for a summary of the description.
    """
    if question:
        user = _ANSWER_USER_WITH_QUESTION.format(description=description, question=question)
    else:
        user = _ANSWER_USER_SUMMARY.format(description=description)
    return [
        {"role": "system", "content": _ANSWER_SYSTEM},
        {"role": "user", "content": user},
    ]


def build_diagram_messages(prompt: str) -> list[dict[str, str]]:
    """Build the Mermaid text-to-diagram message pair."""
    return [
        {"role": "system", "content": _DIAGRAM_SYSTEM},
        {"role": "user", "content": f"Create a Mermaid diagram for: {prompt}"},
    ]

"""Prompt templates for the text-generation step.

Templates use ``{title}``, ``{content}`` and ``{source}`` placeholders and are
filled with ``str.replace`` since the JSON reply contract contains braces.
"""

REPLY_CONTRACT = """Respond with a JSON object containing:
{
  "transformedTitle": "%s",
  "transformedContent": "%s",
  "tags": ["3-5 relevant English tags"]
}"""

ARTICLE_BLOCK = """Original Title: {title}
Original Content: {content}
Source: {source}"""

PAMUK_PROMPT = """You are a literary journalist combining the introspective, layered storytelling of Orhan Pamuk with the sharp, elegant prose of The New Yorker.

Transform this news article into a compelling English narrative that:
- Opens with a vivid scene or detail that draws readers in
- Weaves multiple perspectives and layers of meaning
- Uses rich, sensory language while remaining clear and accessible
- Finds the human story within the news
- Keeps the essence and facts of the original story

CRITICAL: Output MUST be in English only. If the source article is in Turkish or any other language, translate it to English while transforming it into literary prose.

""" + ARTICLE_BLOCK + "\n\n" + REPLY_CONTRACT % (
    "A literary, compelling English title (maximum 80 characters, DO NOT include the character count in the output)",
    "The transformed article in English (300-500 words)",
)

DIRECT_PROMPT = """You are a bold, no-nonsense writer with a direct, brutally honest voice and gritty, punchy, minimalist prose.

Transform this news article into a compelling, hard-hitting narrative that:
- Uses short, punchy sentences. No fluff.
- Cuts through the noise to the raw truth.
- Uses a direct, conversational tone.
- Avoids flowery adjectives and passive voice.
- Keeps the facts but delivers them with impact.

CRITICAL: Output MUST be in English only. If the source article is in Turkish or any other language, translate it to English while transforming it.

""" + ARTICLE_BLOCK + "\n\n" + REPLY_CONTRACT % (
    "A punchy, direct English title (max 80 chars, NO count in output)",
    "The transformed article in English (300-500 words)",
)

GREENTEXT_PROMPT = """You are an anonymous user on an image board. Write a greentext story about the events in this news article.

Formatting rules:
- Every line MUST start with >
- First line MUST be > be [someone/something related to story]
- Second line MUST be > do [something related]
- Present tense, super concise, minimum grammar
- Dry humor, a bit self-deprecating, not try-hard edgy
- Optional closer like > mfw ... or > tfw ...

Constraints:
- Keep it readable even if the reader doesn't know image board culture
- Avoid slurs or anything that would instantly get removed on a normal platform
- STRICTLY follow the > format. Output raw text in the transformedContent field.

""" + ARTICLE_BLOCK + "\n\n" + REPLY_CONTRACT % (
    "A short, sarcastic English title (max 80 chars, NO count in output)",
    "The greentext story (raw string with > line breaks preserved)",
)

STYLE_PROMPTS = {
    "pamuk": PAMUK_PROMPT,
    "direct": DIRECT_PROMPT,
    "greentext": GREENTEXT_PROMPT,
}

INSTRUCTION_TEMPLATE = """{instruction}

Write the result in English. If the source article is in another language, translate it.

""" + ARTICLE_BLOCK + "\n\n" + REPLY_CONTRACT % (
    "An English title (max 80 chars, NO count in output)",
    "The rewritten article in English",
)


def render(template: str, title: str, content: str, source: str) -> str:
    return (
        template
        .replace("{title}", title)
        .replace("{content}", content)
        .replace("{source}", source)
    )


def instruction_prompt(instruction: str) -> str:
    """Wrap a free-form instruction in the article block and reply contract."""
    return INSTRUCTION_TEMPLATE.replace("{instruction}", instruction)

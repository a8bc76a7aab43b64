ANALYST_INSTRUCTION = """
You are a thoughtful literary critic. You read a single poem and describe it for a general reader
who has just finished reading it. Be concise and concrete; do not quote the poem at length.

Answer with a single JSON object and nothing else. Inside your strings, use single quotes if you need to quote.
"""


ANALYSIS_PROMPT = """Analyze the following poem titled "{title}" by {author}.
Poem text:
{text}

Provide a JSON response with:
- mood: A few words describing the mood.
- summary: A 2-sentence summary.
- themes: An array of 3-4 key themes.

{format_instructions}
"""


IMAGE_PROMPT = """A dreamy, artistic, abstract visual representation of this poem: "{title}" by {author}.
The mood is {opening}.
Style: Soft, ethereal, high quality, digital art."""


def build_analysis_prompt(title: str, author: str, lines, format_instructions: str = "") -> str:
    return ANALYSIS_PROMPT.format(
        title=title,
        author=author,
        text="\n".join(lines),
        format_instructions=format_instructions,
    ).strip()


def build_image_prompt(title: str, author: str, lines, max_lines: int = 5) -> str:
    # stanza breaks inside the opening lines are skipped
    opening = " ".join(line.strip() for line in lines[:max_lines] if line.strip())
    return IMAGE_PROMPT.format(title=title, author=author, opening=opening)

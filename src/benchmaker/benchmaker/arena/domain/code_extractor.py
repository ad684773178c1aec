"""Pull a runnable HTML document out of a model's reply.

Models wrap code in markdown fences, prepend chatter, or emit only a body
fragment. Both extractors return a complete ``<!DOCTYPE html>`` document
whenever they find HTML at all.
"""

import re

DEFAULT_FRONTEND_SYSTEM_PROMPT = """\
You are an expert frontend developer. Generate a complete, single-page HTML \
document with embedded CSS and JavaScript based on the user's request.

Requirements:
- Output ONLY the HTML code, no explanations or markdown formatting
- Include all CSS in a <style> tag in the <head>
- Include all JavaScript in a <script> tag before </body>
- Use modern, semantic HTML5
- Make the design visually appealing and responsive
- Ensure the code is complete and functional
- Do not include any text before or after the HTML code"""

_FENCED = re.compile(r"```(?:html?|htm)?\s*\n?([\s\S]*?)```", re.IGNORECASE)
_DOCUMENT_START = re.compile(r"^(?:<!DOCTYPE\s+html|<html)", re.IGNORECASE)
_HEAD_OR_BODY_START = re.compile(r"^<(?:head|body)", re.IGNORECASE)
_FRAGMENT_START = re.compile(
    r"^<(?:div|section|main|header|nav|article|aside|footer|form|table|ul|ol|p|h[1-6])",
    re.IGNORECASE,
)
_EMBEDDED = re.compile(
    r"<(!DOCTYPE|html|head|body|div|section|main)[^>]*>[\s\S]*</\1>", re.IGNORECASE
)
_PARTIAL_START = re.compile(r"^<(?:head|body|div|section|main|header)", re.IGNORECASE)
_HAS_HEAD = re.compile(r"<head[\s>]", re.IGNORECASE)
_HAS_BODY = re.compile(r"<body[\s>]", re.IGNORECASE)

_DEFAULT_HEAD = """\
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>"""


def wrap_in_document(content: str) -> str:
    has_head = _HAS_HEAD.search(content) is not None
    has_body = _HAS_BODY.search(content) is not None
    if has_head and has_body:
        parts = [content]
    elif has_head:
        parts = [content, "<body></body>"]
    elif has_body:
        parts = [_DEFAULT_HEAD, content]
    else:
        parts = [_DEFAULT_HEAD, "<body>", content, "</body>"]
    return "\n".join(['<!DOCTYPE html>\n<html lang="en">', *parts, "</html>"])


def ensure_complete_document(html: str) -> str:
    html = html.strip()
    if re.match(r"^<!DOCTYPE\s+html", html, re.IGNORECASE):
        return html
    if re.match(r"^<html", html, re.IGNORECASE):
        return f"<!DOCTYPE html>\n{html}"
    if _HEAD_OR_BODY_START.match(html):
        return wrap_in_document(html)
    return wrap_in_document(f"<body>{html}</body>")


def extract_code_from_response(response: str) -> str:
    """Best HTML document in a finished reply; the trimmed reply when none is found."""
    if not response:
        return ""
    text = response.strip()

    fenced = _FENCED.search(text)
    if fenced and fenced.group(1):
        return ensure_complete_document(fenced.group(1))
    if _DOCUMENT_START.match(text):
        return text
    if _HEAD_OR_BODY_START.match(text):
        return wrap_in_document(text)
    if _FRAGMENT_START.match(text):
        return wrap_in_document(f"<body>{text}</body>")
    embedded = _EMBEDDED.search(text)
    if embedded:
        return ensure_complete_document(embedded.group(0))
    return text


def extract_code_from_streaming_content(streamed: str) -> str:
    """Best HTML so far in a partial reply, including an unterminated fence.

    Returns "" until something recognisably HTML has arrived.
    """
    if not streamed:
        return ""
    text = streamed.strip()

    fence = text.find("```")
    if fence != -1:
        newline = text.find("\n", fence + 3)
        if newline != -1:
            code_start = newline + 1
            fence_end = text.find("```", code_start)
            if fence_end != -1:
                return ensure_complete_document(text[code_start:fence_end])
            partial = text[code_start:].strip()
            if partial:
                return ensure_complete_document(partial)

    if _DOCUMENT_START.match(text):
        return text
    if _PARTIAL_START.match(text):
        return ensure_complete_document(text)
    return ""

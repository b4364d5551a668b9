import html


def decode_entities(text: str) -> str:
    """
    Resolves character references (``&amp;``, ``&#039;``, ``&eacute;``...)
    into literal characters. Markup is left as plain text.
    """
    if not text:
        return ""
    return html.unescape(text)

"""Rough token estimation for model input and output text."""


def estimate_tokens(text: str) -> int:
    """Estimate the token count of ``text`` at about four bytes per token."""
    return len(text.encode("utf-8")) // 4
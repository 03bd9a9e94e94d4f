# promptmanager/core/token_counter.py

# Rough heuristic only: one token per four characters.
CHARS_PER_TOKEN = 4
CONTEXT_WINDOW_LABEL = "1m"

def estimate_tokens(text: str) -> int:
    """Character-based token estimate for a prompt."""
    if not text:
        return 0
    return len(text) // CHARS_PER_TOKEN

def format_token_count(count: int) -> str:
    """Thousands-separated count, e.g. 12,345."""
    return f"{count:,}"

def token_label(text: str) -> str:
    """Label shown next to the prompt preview, e.g. '[1,024]/1m tokens'."""
    return f"[{format_token_count(estimate_tokens(text))}]/{CONTEXT_WINDOW_LABEL} tokens"

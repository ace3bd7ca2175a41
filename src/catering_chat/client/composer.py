from __future__ import annotations

MAX_LENGTH = 2000
COUNTER_THRESHOLD = 200

EMPTY = "Mesaj boş olamaz"


def validate_message(content: str, max_length: int = MAX_LENGTH) -> tuple[str, str | None]:
    """Return the trimmed text and a problem description, if any."""
    text = content.strip()
    if not text:
        return text, EMPTY
    if len(text) > max_length:
        return text, f"Mesaj çok uzun (max {max_length} karakter)"
    return text, None


class MessageComposer:
    """Draft text box state: trims on submit, counts down near the limit."""

    def __init__(self, max_length: int = MAX_LENGTH, threshold: int = COUNTER_THRESHOLD) -> None:
        self.max_length = max_length
        self.threshold = threshold
        self.text = ""
        self.disabled = False

    @property
    def remaining(self) -> int:
        return self.max_length - len(self.text)

    @property
    def counter_label(self) -> str | None:
        if self.remaining > self.threshold:
            return None
        return f"{len(self.text)}/{self.max_length}"

    @property
    def can_submit(self) -> bool:
        _, problem = validate_message(self.text, self.max_length)
        return problem is None and not self.disabled

    def submit(self) -> str | None:
        """Take the draft for sending; the box is cleared only on success."""
        if self.disabled:
            return None
        text, problem = validate_message(self.text, self.max_length)
        if problem is not None:
            return None
        self.text = ""
        return text

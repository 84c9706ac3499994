"""Extraction of ``exec`` fenced blocks from generated text."""

import re

EXEC_LABEL = "exec"

# ```exec\n{...}\n```
EXEC_BLOCK_PATTERN = re.compile(
    r"^[ \t]*```[ \t]*" + EXEC_LABEL + r"[ \t]*\r?\n(.*?)\r?\n?[ \t]*```[ \t]*$",
    re.DOTALL | re.MULTILINE,
)


def extract_exec_blocks(text: str) -> list[str]:
    """Return the bodies of all ``exec`` fenced blocks, in order.

    Args:
        text: Finished answer text (markdown).

    Returns:
        Stripped block bodies; empty blocks are skipped.
    """
    blocks = []
    for match in EXEC_BLOCK_PATTERN.finditer(text):
        body = match.group(1).strip()
        if body:
            blocks.append(body)
    return blocks

"""Reply template substitution."""

import re

from hibiki.domain.entities.user import User

SENDER_PLACEHOLDER = "$username"

CAPTURE_PLACEHOLDER = re.compile(r"\$(\d+)")


def substitute_captures(template: str, match: re.Match[str]) -> str:
    """Replace ``$N`` with capture group N of ``match``.

    ``$0`` is the whole match. Groups that do not exist or did not
    participate in the match are replaced with an empty string.

    Args:
        template: Reply template.
        match: Successful regex match.

    Returns:
        Template with capture placeholders substituted.
    """

    def replace(m: re.Match[str]) -> str:
        index = int(m.group(1))
        if index > (match.re.groups):
            return ""
        return match.group(index) or ""

    return CAPTURE_PLACEHOLDER.sub(replace, template)


def substitute_sender(template: str, sender: User | None) -> str:
    """Replace ``$username`` with the sender's mention label.

    Args:
        template: Reply template.
        sender: Sender of the triggering message.

    Returns:
        Template with the sender placeholder substituted.
    """
    label = sender.mention_label if sender is not None else ""
    return template.replace(SENDER_PLACEHOLDER, label)

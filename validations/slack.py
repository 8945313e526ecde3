# =============================================================================
# validations/slack.py - Slack Message Validator
# =============================================================================
# Errors:
#   INVALID_TOKEN   - token length doesn't match its prefix
#   MISSING_COMMAND - type "command" without a command
#
# Warnings cover message size, mentions, attachments/files, spam-like text
# and content that looks sensitive (tokens, PII, restricted markings).
# =============================================================================

import re

from core.models.validation import FieldError, FieldWarning
from payloads.slack import SlackPayload
from validations.base import BaseValidator

# Expected token length by prefix
TOKEN_LENGTHS = {
    "xoxb-": 56,
    "xoxs-": 56,
    "xoxa-": 56,
    "xoxr-": 56,
    "xoxp-": 72,
    "xapp-": 72,
}
TOKEN_IN_TEXT = re.compile(r"\b(xox[bspar]|xapp)-[A-Za-z0-9-]{10,}")

MAX_ATTACHMENTS = 20
MAX_BLOCKS = 50
MAX_MESSAGE_TEXT = 4000
MAX_ATTACHMENT_TEXT = 8000
MAX_MENTIONS = 10
MAX_FILE_SIZE = 100 * 1024 * 1024
CAPS_RATIO = 0.7
CAPS_MIN_LENGTH = 10
PROMOTIONAL_THRESHOLD = 2

CHANNEL_WIDE_MENTIONS = ("<!channel>", "<!here>", "<!everyone>")
DANGEROUS_FILETYPES = {"exe", "bat", "cmd", "scr", "pif", "com", "vbs", "js", "jar"}
SENSITIVE_FILENAME_WORDS = ("password", "secret", "credential", "private_key", "id_rsa", ".env")
PROMOTIONAL_WORDS = (
    "free", "buy now", "limited time", "click here", "discount",
    "offer", "winner", "act now", "guaranteed",
)
RESTRICTED_WORDS = ("confidential", "internal only", "classified", "proprietary", "nda")
REPEATED_CHARACTERS = re.compile(r"(.)\1{4,}")
PII_PATTERNS = {
    "SSN": re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    "credit card": re.compile(r"\b(?:\d{4}[ -]?){3}\d{4}\b"),
    "email": re.compile(r"\b[\w.+-]+@[\w-]+\.[\w.]+\b"),
    "phone": re.compile(r"\b\(?\d{3}\)?[ .-]?\d{3}[ .-]?\d{4}\b"),
}


class SlackValidator(BaseValidator):
    """Validates Slack commands, events and interactive payloads."""

    shape = SlackPayload
    model_type = "slack"

    def check_rules(self, record: SlackPayload) -> list[FieldError]:
        errors = []

        prefix = record.token[:5]
        expected = TOKEN_LENGTHS.get(prefix)
        if expected is not None and len(record.token) != expected:
            errors.append(FieldError(
                field="token",
                message=f"{prefix} tokens must be {expected} characters long",
                code="INVALID_TOKEN",
            ))

        if record.type == "command" and not record.command:
            errors.append(FieldError(
                field="command",
                message="command payloads must include the slash command",
                code="MISSING_COMMAND",
            ))

        return errors

    def check_warnings(self, record: SlackPayload) -> list[FieldWarning]:
        warnings = []
        message = record.message

        texts = [("text", record.text or "")]
        if message is not None:
            texts.append(("message.text", message.text))
            texts.extend(
                (f"message.attachments[{i}].text", a.text or "")
                for i, a in enumerate(message.attachments)
            )

            if len(message.attachments) > MAX_ATTACHMENTS:
                warnings.append(FieldWarning(
                    field="message.attachments",
                    message=f"Message has {len(message.attachments)} attachments",
                    code="EXCESSIVE_ATTACHMENTS",
                    suggestion=f"Slack renders at most {MAX_ATTACHMENTS} attachments",
                ))
            if len(message.blocks) > MAX_BLOCKS:
                warnings.append(FieldWarning(
                    field="message.blocks",
                    message=f"Message has {len(message.blocks)} blocks",
                    code="EXCESSIVE_BLOCKS",
                    suggestion=f"Slack accepts at most {MAX_BLOCKS} blocks per message",
                ))
            if len(message.text) > MAX_MESSAGE_TEXT:
                warnings.append(FieldWarning(
                    field="message.text",
                    message=f"Message text is {len(message.text)} characters long",
                    code="LONG_MESSAGE_TEXT",
                    suggestion="Split long messages or attach a file",
                ))
            for i, attachment in enumerate(message.attachments):
                if attachment.text and len(attachment.text) >= MAX_ATTACHMENT_TEXT:
                    warnings.append(FieldWarning(
                        field=f"message.attachments[{i}].text",
                        message="Attachment text is at the size limit and may be truncated",
                        code="LONG_ATTACHMENT_TEXT",
                        suggestion="Shorten the attachment text",
                    ))
            warnings.extend(self._file_warnings(record))

        for field, text in texts:
            if text:
                warnings.extend(self._text_warnings(field, text))

        return warnings

    def _file_warnings(self, record: SlackPayload) -> list[FieldWarning]:
        warnings = []
        for i, f in enumerate(record.message.files):
            if f.filetype.lower() in DANGEROUS_FILETYPES:
                warnings.append(FieldWarning(
                    field=f"message.files[{i}].filetype",
                    message=f"File type '{f.filetype}' can be executable",
                    code="POTENTIALLY_DANGEROUS_FILETYPE",
                    suggestion="Share executables through a trusted artifact store",
                ))
            if f.size > MAX_FILE_SIZE:
                warnings.append(FieldWarning(
                    field=f"message.files[{i}].size",
                    message=f"File is {f.size // (1024 * 1024)} MB",
                    code="LARGE_FILE_SIZE",
                    suggestion="Share large files by link",
                ))
            if any(word in f.name.lower() for word in SENSITIVE_FILENAME_WORDS):
                warnings.append(FieldWarning(
                    field=f"message.files[{i}].name",
                    message=f"File name '{f.name}' suggests sensitive content",
                    code="SENSITIVE_FILENAME",
                    suggestion="Don't share secrets in chat",
                ))
        return warnings

    def _text_warnings(self, field: str, text: str) -> list[FieldWarning]:
        warnings = []
        lowered = text.lower()

        if TOKEN_IN_TEXT.search(text):
            warnings.append(FieldWarning(
                field=field,
                message="Text appears to contain a Slack token",
                code="POTENTIAL_TOKEN_EXPOSURE",
                suggestion="Revoke the token and remove it from the message",
            ))

        mentions = text.count("<@")
        if mentions > MAX_MENTIONS:
            warnings.append(FieldWarning(
                field=field,
                message=f"Text mentions {mentions} users",
                code="EXCESSIVE_MENTIONS",
                suggestion="Mention a user group instead",
            ))

        wide = [m for m in CHANNEL_WIDE_MENTIONS if m in text]
        if wide:
            warnings.append(FieldWarning(
                field=field,
                message=f"Channel-wide mention: {', '.join(wide)}",
                code="CHANNEL_WIDE_MENTION",
                suggestion="Notify the whole channel only when necessary",
            ))

        letters = [c for c in text if c.isalpha()]
        if len(text) > CAPS_MIN_LENGTH and letters:
            if sum(c.isupper() for c in letters) / len(letters) > CAPS_RATIO:
                warnings.append(FieldWarning(
                    field=field,
                    message="Text is mostly upper case",
                    code="EXCESSIVE_CAPS",
                    suggestion="Avoid writing in all caps",
                ))

        if REPEATED_CHARACTERS.search(text):
            warnings.append(FieldWarning(
                field=field,
                message="Text repeats the same character many times",
                code="REPEATED_CHARACTERS",
                suggestion="Remove repeated characters",
            ))

        promo = [w for w in PROMOTIONAL_WORDS if w in lowered]
        if len(promo) > PROMOTIONAL_THRESHOLD:
            warnings.append(FieldWarning(
                field=field,
                message=f"Text looks promotional: {', '.join(promo)}",
                code="PROMOTIONAL_CONTENT",
                suggestion="Keep promotions out of work channels",
            ))

        pii = [kind for kind, pattern in PII_PATTERNS.items() if pattern.search(text)]
        if pii:
            warnings.append(FieldWarning(
                field=field,
                message=f"Text may contain personal data: {', '.join(pii)}",
                code="POTENTIAL_PII",
                suggestion="Remove personal data from the message",
            ))

        restricted = [w for w in RESTRICTED_WORDS if re.search(rf"\b{re.escape(w)}\b", lowered)]
        if restricted:
            warnings.append(FieldWarning(
                field=field,
                message=f"Text carries restricted markings: {', '.join(restricted)}",
                code="RESTRICTED_CONTENT",
                suggestion="Share restricted material through approved channels only",
            ))

        return warnings

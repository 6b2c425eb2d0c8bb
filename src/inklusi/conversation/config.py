"""Conversation constants."""

WELCOME_MESSAGE = (
    "Hello! I am a companion chatbot that will help you understand and apply "
    "the principles of Universal Design for Learning (UDL) for children with "
    "special needs. What would you like to ask today?"
)

ERROR_MESSAGE_TEMPLATE = "An error occurred: {reason}"
DEFAULT_ERROR_REASON = "Unable to reach the AI."

# Characters of user text shown in log lines
LOG_PREVIEW_LENGTH = 50

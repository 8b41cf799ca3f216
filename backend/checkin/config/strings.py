# /checkin/config/strings.py

# This file contains all user-facing strings emitted by the check-in engine,
# making them easy to manage, update, and eventually localize without
# changing engine logic.

# Conversation
GREETING = "Olá, {name}! 😊"

# Photo step summaries (sent as the patient's own message)
PHOTOS_SENT_SINGULAR = "📸 {count} foto enviada"
PHOTOS_SENT_PLURAL = "📸 {count} fotos enviadas"
NO_PHOTOS = "Sem fotos desta vez"

# Authoring defaults
NEW_STEP_QUESTION = "Nova pergunta"
DEFAULT_INPUT_PLACEHOLDER = "Escreva sua resposta..."
TEMPLATE_FLOW_NAME = "Check-in (modelo)"
EMPTY_FLOW_NAME = "Novo Check-in"
DUPLICATE_SUFFIX = " (cópia)"

# Values that numeric conditions read as zero
NONE_ANSWER = "Nenhum"

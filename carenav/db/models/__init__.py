from carenav.db.models.conversation import Conversation, Message
from carenav.db.models.document import Document
from carenav.db.models.issue import Issue
from carenav.db.models.lead import LeadCapture
from carenav.db.models.resolution import Resolution

__all__ = [
    "Conversation",
    "Document",
    "Issue",
    "LeadCapture",
    "Message",
    "Resolution",
]

"""Follow-up chat about an issue and its resolution map."""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator
from typing import Any

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.common.enums import MessageRole, category_label
from carenav.common.logging import get_logger
from carenav.db.models.conversation import Conversation, Message
from carenav.db.models.issue import Issue
from carenav.integrations.ai_client import AIClient

logger = get_logger("chat.service")

MAX_HISTORY_MESSAGES = 20

CHAT_SYSTEM_PROMPT = """You are a helpful healthcare advocacy assistant. You're helping someone who has already received an Issue Resolution Map for their healthcare administrative problem.

Your role is to:
1. Answer their follow-up questions about their situation
2. Provide more specific guidance on action steps
3. Help them understand confusing healthcare terminology
4. Offer encouragement and support

Important guidelines:
- Be conversational but professional
- Reference their specific situation (issue type, resolution map details) when relevant
- If they ask about something outside healthcare administration, politely redirect
- Never provide medical advice or legal counsel
- Keep responses concise but helpful (2-4 paragraphs max unless they need detailed instructions)"""


def build_context_message(issue: Issue) -> str:
    parts = [
        "I need help with a healthcare issue.",
        "",
        f"Issue Type: {category_label(issue.category)}",
        "",
        f"My Situation: {issue.description}",
    ]
    if issue.insurer_name:
        parts.append(f"Insurance Company: {issue.insurer_name}")
    if issue.provider_name:
        parts.append(f"Healthcare Provider: {issue.provider_name}")
    if issue.amount_involved:
        parts.append(f"Amount Involved: ${float(issue.amount_involved):,.2f}")

    resolution = issue.resolution
    if resolution is not None:
        parts += [
            "",
            "My Resolution Map says:",
            f"- What's happening: {resolution.what_is_happening}",
            f"- Likelihood of success: {resolution.likelihood_of_success}",
            f"- Estimated timeframe: {resolution.estimated_timeframe}",
        ]
    return "\n".join(parts)


def opening_reply(issue: Issue) -> str:
    return (
        "I understand your situation. I have your Issue Resolution Map and I'm here to "
        f"help you with any questions about your {category_label(issue.category)}. "
        "What would you like to know?"
    )


def build_chat_messages(
    issue: Issue, history: list[Message], user_message: str
) -> list[dict[str, Any]]:
    """Model input: issue context (first turn only), recent history, new message."""
    messages: list[dict[str, Any]] = []
    if not history:
        messages.append({"role": "user", "content": build_context_message(issue)})
        messages.append({"role": "assistant", "content": opening_reply(issue)})

    for msg in history[-MAX_HISTORY_MESSAGES:]:
        messages.append({"role": msg.role, "content": msg.content})

    messages.append({"role": "user", "content": user_message})
    return messages


def canned_reply(issue: Issue) -> str:
    """Deterministic reply used when no live model is available."""
    reply = (
        f"Thanks for your question about your {category_label(issue.category).lower()}. "
    )
    resolution = issue.resolution
    if resolution is not None and resolution.next_steps:
        first = resolution.next_steps[0]
        reply += (
            f"Based on your Resolution Map, the best place to start is: {first['action']}. "
            f"{first['details']} "
        )
        reply += f"Expect this to take about {resolution.estimated_timeframe}. "
    reply += (
        "Keep notes of every call, including the date, the person you spoke with "
        "and any reference number."
    )
    return reply


def sse_event(payload: Any) -> str:
    if isinstance(payload, str):
        return f"data: {payload}\n\n"
    return f"data: {json.dumps(payload)}\n\n"


class ChatService:
    def __init__(self, client: AIClient | None = None) -> None:
        self._client = client or AIClient()

    async def get_history(self, issue_id: uuid.UUID, db: AsyncSession) -> list[Message]:
        result = await db.execute(
            select(Message)
            .join(Conversation, Message.conversation_id == Conversation.id)
            .where(Conversation.issue_id == issue_id)
            .order_by(Message.created_at)
        )
        return list(result.scalars().all())

    async def _get_or_create_conversation(
        self, issue: Issue, db: AsyncSession
    ) -> Conversation:
        result = await db.execute(
            select(Conversation).where(Conversation.issue_id == issue.id)
        )
        conversation = result.scalar_one_or_none()
        if conversation is None:
            conversation = Conversation(issue_id=issue.id, messages=[])
            db.add(conversation)
            await db.flush()
            logger.info("Started conversation for issue %s", issue.id)
        return conversation

    async def start_reply(
        self, issue: Issue, user_message: str, db: AsyncSession
    ) -> AsyncIterator[str]:
        """Store the user's message and return the SSE stream for the reply.

        The returned generator stores the assistant message and commits
        once the reply is complete.
        """
        conversation = await self._get_or_create_conversation(issue, db)
        history = await self.get_history(issue.id, db)
        messages = build_chat_messages(issue, history, user_message)

        db.add(
            Message(
                conversation_id=conversation.id,
                role=MessageRole.USER.value,
                content=user_message,
            )
        )
        await db.flush()

        return self._stream(issue, conversation.id, messages, db)

    async def _reply_chunks(self, issue: Issue, messages: list[dict[str, Any]]) -> AsyncIterator[str]:
        if self._client.is_mock:
            for word in canned_reply(issue).split(" "):
                yield word + " "
            return

        produced = False
        try:
            async for delta in self._client.stream_chat(CHAT_SYSTEM_PROMPT, messages):
                produced = True
                yield delta
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("LLM chat stream failed, using fallback: %s", e)
            if not produced:
                yield canned_reply(issue)

    async def _stream(
        self,
        issue: Issue,
        conversation_id: uuid.UUID,
        messages: list[dict[str, Any]],
        db: AsyncSession,
    ) -> AsyncIterator[str]:
        chunks: list[str] = []
        async for text in self._reply_chunks(issue, messages):
            chunks.append(text)
            yield sse_event({"text": text})

        db.add(
            Message(
                conversation_id=conversation_id,
                role=MessageRole.ASSISTANT.value,
                content="".join(chunks).strip(),
            )
        )
        await db.commit()
        logger.info("Chat reply stored for issue %s (%d chunks)", issue.id, len(chunks))
        yield sse_event("[DONE]")

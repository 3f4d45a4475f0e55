"""
Conversation tools shared by the Story Analyst and Game Designer
"""

from pydantic import BaseModel, Field

from game_maker.agents.tools.base import AgentTool

STOP_WORDS = frozenset(
    ["the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "is", "was", "it"]
)
MAX_KEYWORDS = 10
FOLLOW_UP_LIMIT = 10


def extract_keywords(text: str) -> list[str]:
    """Unique lowercase words longer than three letters, in order of appearance"""
    keywords: list[str] = []
    for word in text.lower().split():
        if len(word) > 3 and word not in STOP_WORDS and word not in keywords:
            keywords.append(word)
    return keywords[:MAX_KEYWORDS]


class AskQuestionArgs(BaseModel):
    question: str = Field(description="The question to ask the child")
    context: str | None = Field(default=None, description="Why this question is being asked")


class ProcessResponseArgs(BaseModel):
    user_response: str = Field(description="The child's response (typed or transcribed)")
    question_context: str = Field(description="The question that was asked")


class GenerateFollowUpArgs(BaseModel):
    conversation_history: list[str] = Field(description="Previous messages in the conversation")
    current_topic: str = Field(description="The topic being discussed")


async def ask_question(args: AskQuestionArgs) -> dict:
    return {
        "action": "ask_user",
        "question": args.question,
        "context": args.context,
        "awaiting_response": True,
    }


async def process_response(args: ProcessResponseArgs) -> dict:
    return {
        "response": args.user_response,
        "question": args.question_context,
        "keywords": extract_keywords(args.user_response),
        "has_more_to_discuss": len(args.user_response) > 50,
    }


async def generate_follow_up(args: GenerateFollowUpArgs) -> dict:
    return {
        "topic": args.current_topic,
        "suggested_questions": [
            "Can you tell me more about that?",
            "What was your favorite part?",
            "How did that make you feel?",
        ],
        "should_continue": len(args.conversation_history) < FOLLOW_UP_LIMIT,
    }


def ask_question_tool() -> AgentTool:
    return AgentTool(
        "ask_question",
        "Ask the child a question and wait for their answer",
        AskQuestionArgs,
        ask_question,
    )


def process_response_tool() -> AgentTool:
    return AgentTool(
        "process_response",
        "Pull key words out of the child's answer to a question",
        ProcessResponseArgs,
        process_response,
    )


def generate_follow_up_tool() -> AgentTool:
    return AgentTool(
        "generate_follow_up",
        "Suggest follow-up questions based on the conversation so far",
        GenerateFollowUpArgs,
        generate_follow_up,
    )

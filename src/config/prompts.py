"""
Prompt templates for the generative model.

These are tunable configuration, not a contract: both can be replaced
through STUDYFLOW_PLAN_PROMPT / STUDYFLOW_CHAT_PROMPT. Placeholders:
- plan: {subjects}, {available_time}
- chat: {query}
"""

PLAN_PROMPT_TEMPLATE = """You are an AI study plan generator. You will take in subjects and \
available study time and provide a daily study plan that maximizes learning effectiveness. \
Consider the Pomodoro technique, spaced practice and other effective studying methods. \
Break down each subject into smaller tasks, each with a concrete activity in its note \
(for example "Read chapter 1"). Use whole minutes and keep the total duration within the \
available time.

Subjects: {subjects}
Available Study Time (minutes): {available_time}

Output the study plan in JSON format."""

CHAT_PROMPT_TEMPLATE = """You are a helpful study assistant. A user will ask you a question \
about a subject they are studying. Your goal is to provide a concise and accurate answer, \
including examples where relevant to aid understanding.

User question: {query}

Your concise answer with examples:"""


def render_plan_prompt(template: str, subjects: list[str], available_time: int) -> str:
    return template.format(subjects=", ".join(subjects), available_time=available_time)


def render_chat_prompt(template: str, query: str) -> str:
    return template.format(query=query)

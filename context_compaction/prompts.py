# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Prompt text for history summarization and the summary frame.

SUMMARY_PROMPT placeholders: {conversation}, {max_words}, {verbosity},
{language}. Custom templates use the same names.
"""

SUMMARY_HEADER = "[Summary of earlier conversation]"
SUMMARY_FOOTER = "[Recent conversation follows. Continue the current task.]"

SUMMARY_SYSTEM_PROMPT = (
    "You are a context summarization assistant. You read the early part of a "
    "conversation between a user, an AI assistant and its tools, and write a "
    "summary that will replace those messages.\n\n"
    "Do NOT continue the conversation. Do NOT respond to any questions in the "
    "conversation. Do NOT call tools. ONLY output the summary."
)

SUMMARY_PROMPT = """Please summarize the following conversation history, preserving key information, decisions, and results.
Note: this is an early part of a multi-turn conversation. The summary will provide context for the dialogue that follows.

Conversation history:
{conversation}

Write {verbosity} (within {max_words} words), focusing on:
1. Main tasks or operations completed
2. Key information or data obtained
3. Important decisions made
{language}
Summary:"""

VERBOSITY_DIRECTIVES = {
    "concise": "a brief summary covering only the main points",
    "balanced": "a balanced summary of the key information",
    "detailed": "a comprehensive summary that also keeps intermediate steps and findings",
}

LANGUAGE_DIRECTIVE = "Write the summary in {language}."

ROLE_LABELS = {
    "user": "User",
    "assistant": "Assistant",
    "tool": "Tool Result",
    "system": "System",
}

"""Todo agent: turns one user utterance into tool calls and a summarized reply.

One request runs dispatch → execute → summarize:

1. Send the system prompt, the user text and the tool catalog to the backend.
2. If it asks for tool calls, run each of them against the store, in order,
   even when an earlier one fails.
3. Send the literal results back and use the backend's summary as the reply.

Only one request is handled at a time. A submit that arrives while another is
in flight is rejected with a busy reply.
"""
import json
import logging
from datetime import date
from typing import Callable, List

from .llm import AiResponse, CompletionBackend
from .tools import execute_tool, tool_schemas

logger = logging.getLogger(__name__)

EMPTY_INPUT_REPLY = "Please enter a command."
BUSY_REPLY = "I'm still working on your previous request."
FAULT_REPLY = "Sorry, I encountered an error. Please try again."
NO_TEXT_REPLY = "I processed your request."
SUMMARY_FALLBACK_REPLY = "Task completed successfully."
TOOLS_ACK = "I executed the tools and got these results."

SYSTEM_PROMPT = """You are a Todo assistant. You help users manage their tasks.

When a user asks to do something with their todos, use the provided tools to:
- Create new todos
- List existing todos with filters
- Mark todos as completed
- Update todo details
- Delete todos

Always use the tools to perform operations instead of just telling the user what to do.
After calling tools, provide a friendly summary of what you did and show relevant task information.

When users mention relative dates like "today", "tomorrow", "this weekend", calculate the actual date.
Today's date is {today}.

Be concise and helpful."""

SUMMARY_PROMPT = """Here are the actual results from the tools I called:

{results}

Please summarize these ACTUAL results for the user. Do not make up or hallucinate any data - only report what you see in the results above."""

IDLE = "idle"
DISPATCHING = "dispatching"
EXECUTING = "executing"
SUMMARIZING = "summarizing"


class TodoAgent:
    """Drives the two-call exchange with the completion backend for one request at a time."""

    def __init__(self, store, backend: CompletionBackend, today: Callable[[], date] = date.today):
        self.store = store
        self.backend = backend
        self.today = today
        self.loading = False
        self.reply = ""
        self.state = IDLE

    def system_prompt(self) -> str:
        return SYSTEM_PROMPT.format(today=self.today().isoformat())

    async def submit(self, text: str) -> str:
        """Handle one utterance and return the reply (also kept on self.reply)."""
        if self.loading:
            logger.warning("Rejected submit while a request is in flight")
            return BUSY_REPLY

        if not text or not text.strip():
            self.reply = EMPTY_INPUT_REPLY
            return self.reply

        self.loading = True
        self.reply = ""
        try:
            self.reply = await self._run(text)
        except Exception as e:
            logger.error(f"Agent request failed: {e}", exc_info=True)
            self.reply = FAULT_REPLY
        finally:
            self.loading = False
            self.state = IDLE
        return self.reply

    async def _run(self, text: str) -> str:
        self.state = DISPATCHING
        messages = [
            {"role": "system", "content": self.system_prompt()},
            {"role": "user", "content": text},
        ]
        logger.info(f"Agent request: '{text[:200]}'")
        response = await self.backend.complete(messages, tool_schemas())

        if response.error:
            return response.text or response.error
        if not response.tool_calls:
            return response.text or NO_TEXT_REPLY

        self.state = EXECUTING
        results = self._execute(response)

        self.state = SUMMARIZING
        messages.append({"role": "assistant", "content": TOOLS_ACK})
        messages.append({
            "role": "user",
            "content": SUMMARY_PROMPT.format(results=json.dumps(results, indent=2, ensure_ascii=False)),
        })
        final = await self.backend.complete(messages)
        return final.text or SUMMARY_FALLBACK_REPLY

    def _execute(self, response: AiResponse) -> List[dict]:
        results = []
        for call in response.tool_calls:
            result = execute_tool(call.name, call.arguments, self.store)
            results.append({"tool": call.name, "result": result.to_dict()})
        return results

"""
app/cli.py

Command-line driver for the assistant.
- Reads one intent payload per line as JSON:
  {"intent": "Map.Search", "text": "coffee nearby", "entities": [{"kind": "Place.Type", "text": "coffee"}]}
- Runs the turn against a single conversation and prints the replies
- Type 'reset' to start a new conversation, 'exit' to quit

Environment: see util/config.py (CALENDAR_PROVIDER defaults to the in-memory calendar).
"""

import json
import sys
import uuid

from core.entities import IntentPayload
from core.router import build_assistant
from core.session import SessionStore
from util.config import Settings, configure_logging


def _print_reply(reply, out):
    for line in reply.messages:
        print(f"Assistant: {line}", file=out)
    if reply.listing:
        for i, place in enumerate(reply.listing["places"], start=1):
            rating = place.get("rating") or "-"
            print(f"  {i}. {place['name']} | {place.get('address') or ''} | rating {rating}", file=out)
        if reply.listing["has_more"]:
            print("  (more results available)", file=out)
    if reply.choices:
        print(f"  [{' / '.join(reply.choices)}]", file=out)
    if reply.map_url:
        print(f"  map: {reply.map_url}", file=out)


def run(lines, assistant, out=sys.stdout):
    """Drive the assistant with payload lines; returns the number of turns handled."""
    sessions = SessionStore()
    conversation_id = uuid.uuid4().hex
    turns = 0
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line.lower() in {"exit", "quit"}:
            break
        if line.lower() == "reset":
            sessions.discard(conversation_id)
            conversation_id = uuid.uuid4().hex
            print("Assistant: Starting over.", file=out)
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            # a bare answer such as "Yes" to a confirmation question
            data = {"intent": "None", "text": line}
        if not isinstance(data, dict):
            print("Assistant: Please send a JSON object.", file=out)
            continue
        sess = sessions.get(conversation_id)
        reply = assistant.handle_turn(IntentPayload.from_dict(data), sess)
        _print_reply(reply, out)
        turns += 1
    return turns


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    assistant = build_assistant(settings)
    print("Assistant ready. One JSON intent payload per line; 'exit' to quit.")

    def prompt_lines():
        while True:
            try:
                yield input("You: ")
            except (EOFError, KeyboardInterrupt):
                print()
                return

    run(prompt_lines() if sys.stdin.isatty() else sys.stdin, assistant)


if __name__ == "__main__":
    main()

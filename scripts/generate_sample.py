"""One-off script: generate a script (or calendar) for a topic and print the normalized JSON."""
import json
import sys
import os

# Ensure app is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.exceptions import ScriptGenerationError
from app.schemas.script import ScriptOptions
from app.services.llm_service import generate_calendar, generate_script


def main(argv: list[str]) -> int:
    if not argv:
        print("usage: generate_sample.py TOPIC [DAYS]")
        return 2
    topic = argv[0]
    days = int(argv[1]) if len(argv) > 1 else 0
    options = ScriptOptions(topic=topic, calendarDays=days)
    try:
        if days > 0:
            result = generate_calendar(options, days)
        else:
            result = generate_script(options)
    except ScriptGenerationError as e:
        print(f"Generation failed: {e}")
        return 1
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

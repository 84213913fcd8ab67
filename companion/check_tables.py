import argparse
import json
import sys

from companion.preprocess.pipeline import Preprocessor
from companion.preprocess.tables import ConfigurationError, load_tables


def check_tables(file_path, utterances=()):
    """Validate a table override file and optionally run utterances through it. Returns an exit code."""
    try:
        tables = load_tables(file_path)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    print("Tables OK.")
    print(f"  Corrections:      {len(tables.corrections)}")
    print(f"  Common words:     {len(tables.common_words)}")
    print(f"  Slang terms:      {len(tables.slang)}")
    print(f"  Context rules:    {len(tables.context_rules)}")
    print(f"  Implicit rules:   {len(tables.implicit_rules)}")
    print(f"  Clarifications:   {', '.join(e.trigger for e in tables.clarifications) or '(none)'}")

    if utterances:
        preprocessor = Preprocessor(tables)
        for text in utterances:
            result = preprocessor.process(text)
            print(f"\n> {text}")
            print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Validate preprocessor rule tables")
    parser.add_argument("--file", type=str, default=None,
                        help="Path to a JSON table override file (defaults to COMPANION_TABLES_PATH or built-ins)")
    parser.add_argument("--utterance", action="append", default=[],
                        help="Utterance to run through the pipeline (repeatable)")

    args = parser.parse_args()
    sys.exit(check_tables(args.file, args.utterance))

# main.py
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from .config import LOG_DIR, LOG_FILE, LOG_LEVEL
from .models import RECIPIENT_TYPES, Candidate, RecipientType

logger = logging.getLogger(__name__)


# ---------- Logging Setup ----------
def setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )


def _recipient(value: str) -> RecipientType:
    recipient = RecipientType.parse(value)
    if recipient is None:
        raise argparse.ArgumentTypeError(
            f"recipient must be one of: {', '.join(r.value for r in RECIPIENT_TYPES)}"
        )
    return recipient


# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="candidate-mailer",
        description="Share candidate profiles with clients, the internal team and superiors",
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- add ----
    add_parser = subparsers.add_parser("add", help="Add a candidate from a JSON file")
    add_parser.add_argument(
        "--file",
        required=True,
        help="JSON document with name, email, skills, customFields, ...",
    )

    # ---- list ----
    list_parser = subparsers.add_parser("list", help="List candidates")
    list_parser.add_argument(
        "--search",
        default="",
        help="Filter by name, email, company, location or skill",
    )

    # ---- show ----
    show_parser = subparsers.add_parser("show", help="Show a candidate and its visibility")
    show_parser.add_argument("id", help="Candidate ID")

    # ---- visibility ----
    vis_parser = subparsers.add_parser("visibility", help="Change who sees which fields")
    vis_parser.add_argument("id", help="Candidate ID")
    vis_group = vis_parser.add_mutually_exclusive_group()
    vis_group.add_argument(
        "--toggle",
        nargs=2,
        metavar=("FIELD", "RECIPIENT"),
        help="Flip one field for one recipient class",
    )
    vis_group.add_argument("--select-all", type=_recipient, metavar="RECIPIENT")
    vis_group.add_argument("--deselect-all", type=_recipient, metavar="RECIPIENT")

    # ---- preview ----
    preview_parser = subparsers.add_parser("preview", help="Generate email previews")
    preview_parser.add_argument("id", help="Candidate ID")
    preview_parser.add_argument("--recipient", type=_recipient, default=None)
    preview_parser.add_argument(
        "--out",
        default=None,
        help="Directory to write <recipient>.html files to (default: print)",
    )

    # ---- send ----
    send_parser = subparsers.add_parser("send", help="Send the email for one recipient class")
    send_parser.add_argument("id", help="Candidate ID")
    send_parser.add_argument("--recipient", type=_recipient, required=True)
    send_parser.add_argument("--to", required=True, help="Recipient address")
    send_parser.add_argument("--cc", default="", help="Comma-separated addresses")
    send_parser.add_argument("--bcc", default="", help="Comma-separated addresses")
    send_parser.add_argument("--subject", default=None, help="Override the generated subject")

    # ---- delete ----
    delete_parser = subparsers.add_parser("delete", help="Delete a candidate and its selections")
    delete_parser.add_argument("id", help="Candidate ID")

    return parser


def load_candidate_file(path: Path) -> Candidate:
    if not path.exists():
        raise FileNotFoundError(f"Candidate file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    # ids and timestamps are always assigned on submission
    data.pop("id", None)
    data.pop("createdAt", None)
    return Candidate.from_document(data)


def print_visibility(matrix) -> None:
    table = [
        [field, toggle.client, toggle.internal, toggle.superiors]
        for field, toggle in matrix.items()
    ]
    print(
        tabulate(
            table,
            headers=["Field", "Client", "Internal", "Superiors"],
            tablefmt="github",
        )
    )


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    # Heavy modules are imported lazily so --help works without a database
    from .composer import EmailComposer
    from .db import MongoDBManager
    from .repository import CandidateRepository
    from .visibility import deselect_all, select_all, toggle_field

    try:
        repository = CandidateRepository(MongoDBManager())

        if args.command == "add":
            candidate_id = repository.add_candidate(load_candidate_file(Path(args.file)))
            print(f"Added candidate: {candidate_id}")

        elif args.command == "list":
            candidates = repository.search_candidates(args.search)
            if not candidates:
                print("No candidates found.")
                return 0
            table = [
                [c.id, c.name, c.email, c.current_company, c.location, ", ".join(c.skills)]
                for c in candidates
            ]
            print(
                tabulate(
                    table,
                    headers=["ID", "Name", "Email", "Company", "Location", "Skills"],
                    tablefmt="github",
                )
            )

        elif args.command == "show":
            candidate = repository.require_candidate(args.id)
            selections = repository.require_selections(args.id)
            print(json.dumps(candidate.to_document(), indent=2))
            print_visibility(selections.field_visibility)

        elif args.command == "visibility":
            selections = repository.require_selections(args.id)
            matrix = selections.field_visibility

            if args.toggle:
                field, recipient = args.toggle
                toggle_field(matrix, field, _recipient(recipient))
            elif args.select_all:
                select_all(matrix, args.select_all)
            elif args.deselect_all:
                deselect_all(matrix, args.deselect_all)

            repository.save_selections(selections)
            print_visibility(matrix)

        elif args.command == "preview":
            composer = EmailComposer(repository)
            draft = composer.prepare(args.id)
            recipients = [args.recipient] if args.recipient else list(RECIPIENT_TYPES)

            out_dir = Path(args.out) if args.out else None
            if out_dir:
                out_dir.mkdir(parents=True, exist_ok=True)

            for recipient in recipients:
                email = draft.email_content[recipient]
                if out_dir:
                    path = out_dir / f"{recipient.value}.html"
                    path.write_text(email.content, encoding="utf-8")
                    print(f"[{recipient.value}] {email.subject} -> {path}")
                else:
                    print(f"===== {recipient.value}: {email.subject} =====")
                    print(email.content)

            composer.save_draft(draft)

        elif args.command == "send":
            composer = EmailComposer(repository)
            draft = composer.prepare(args.id)
            composer.address(draft, args.recipient, args.to)
            if args.subject:
                composer.set_subject(draft, args.recipient, args.subject)

            asyncio.run(composer.send(draft, args.recipient, args.cc, args.bcc))
            composer.save_draft(draft)
            print("Email sent successfully")

        elif args.command == "delete":
            if repository.delete_candidate(args.id):
                print(f"Deleted candidate: {args.id}")
            else:
                print(f"Candidate not found: {args.id}")
                return 1

    except Exception as exc:
        logger.error("Command failed: %s", exc, exc_info=exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

import argparse
import json
import logging
from pathlib import Path

from tqdm import tqdm

from .config import get_settings
from .pipeline.runner import PipelineFactory
from .platforms.resolver import PlatformResolver


logger = logging.getLogger(__name__)


def _read_links_file(path: Path) -> list[str]:
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def build_jobs(args: argparse.Namespace) -> list[tuple[str, tuple]]:
    jobs: list[tuple[str, tuple]] = []
    resolver = PlatformResolver()
    for url in args.videos or []:
        jobs.append(("video", (url,)))
    for url in args.links or []:
        jobs.append(("link", (url,)))
    if args.links_file:
        for url in _read_links_file(Path(args.links_file)):
            kind = "video" if resolver.classify(url).supported else "link"
            jobs.append((kind, (url,)))
    if args.note_title or args.note_content:
        jobs.append(("note", (args.note_title or "", args.note_content or "")))
    return jobs


def main() -> None:
    parser = argparse.ArgumentParser(description="Save videos, links and notes as searchable items")
    parser.add_argument("--videos", nargs="*", help="TikTok, Instagram Reel or YouTube URLs")
    parser.add_argument("--links", nargs="*", help="Web page URLs")
    parser.add_argument("--links-file", help="Path to a file with one URL per line")
    parser.add_argument("--note-title", help="Title of a note to save")
    parser.add_argument("--note-content", help="Body of a note to save")
    parser.add_argument("--user", default="local", help="User id the items belong to")
    parser.add_argument("--output", help="Write the resulting items as JSON to this path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    jobs = build_jobs(args)
    if not jobs:
        raise SystemExit("No inputs provided. Use --videos, --links, --links-file or --note-title/--note-content.")

    settings = get_settings()
    pipeline = PipelineFactory(settings).create()
    handlers = {
        "video": pipeline.save_video,
        "link": pipeline.save_link,
        "note": pipeline.save_note,
    }

    results: list[dict] = []
    for kind, params in tqdm(jobs, desc="Saving", unit="item"):
        try:
            item = handlers[kind](args.user, *params)
            results.append(item.to_dict())
        except Exception as exc:
            logger.error("[cli] %s %s failed: %s", kind, params[0], exc)
            results.append({"input": params[0], "type": kind, "error": str(exc)})

    payload = json.dumps(results, ensure_ascii=False, indent=2)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
        print(f"Done. Output: {output_path}")
    else:
        print(payload)


if __name__ == "__main__":
    main()

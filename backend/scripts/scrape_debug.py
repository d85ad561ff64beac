#!/usr/bin/env python3
"""
Debug the extraction pipeline for one URL without going through the API or writing a scrape log.
Shows which custom instruction matches, the page content sent to the model, and the model output.

Run from backend:
  python scripts/scrape_debug.py https://example.com/events/123
  python scripts/scrape_debug.py https://example.com/events/123 --playwright --content-only
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app.agents.event_extractor import build_prompt, extract_event
from app.db.session import SessionLocal
from app.services.instruction_service import get_active_instructions
from app.services.scraping.fetcher import fetch_page_content
from app.services.scraping.matching import select_instruction


async def run(url: str, force_playwright: bool, content_only: bool) -> int:
    db = SessionLocal()
    try:
        matched = select_instruction(get_active_instructions(db), url)
    finally:
        db.close()
    if matched:
        print(f"Matched instruction {matched.id} (priority {matched.priority}): {matched.url_pattern!r}")
    else:
        print("No custom instruction matches")
    use_playwright = force_playwright or bool(matched and matched.use_playwright)
    guidance = matched.instructions_text if matched else None

    page = await fetch_page_content(url, use_playwright=use_playwright)
    prompt = build_prompt(page, guidance)
    print(f"\n--- prompt ({len(prompt)} chars, playwright={use_playwright}) ---")
    print(prompt[:3000] + ("\n..." if len(prompt) > 3000 else ""))
    if content_only:
        return 0

    event = await extract_event(page, guidance)
    print("\n--- extracted ---")
    print(json.dumps(event.model_dump(mode="json"), indent=2))
    return 0 if event.has_details() else 1


def main():
    parser = argparse.ArgumentParser(description="Debug URL -> event extraction")
    parser.add_argument("url")
    parser.add_argument("--playwright", action="store_true", help="Render with headless Chromium regardless of instruction")
    parser.add_argument("--content-only", action="store_true", help="Stop after building the prompt (no LLM call)")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args.url, args.playwright, args.content_only)))


if __name__ == "__main__":
    main()

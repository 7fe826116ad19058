"""
Quick visual check: renders sample cards into a directory.

    python -m card_canvas [outdir]
"""

import asyncio
import logging
import os
import sys
import tempfile

from . import (RankBackground, RankCard, TextSpec, UserStatus, build_base_card,
               build_rank_card, leave_card, welcome_card)


async def _render_samples(outdir: str):
    rank = RankCard(
        nickname=TextSpec("Wastelander"),
        level=7, rank=3, current_xp=640, required_xp=1000,
        status=UserStatus.DND,
        background_color=RankBackground("#1e1e1e", bubbles="#57F287"),
    )
    samples = {
        "rank.png": await build_rank_card(rank),
        "welcome.png": await build_base_card(
            welcome_card(TextSpec("Wastelander"), None,
                         second_text=TextSpec("You are member #42"))),
        "leave.png": await build_base_card(leave_card(TextSpec("Wastelander"), None)),
    }
    for name, image in samples.items():
        path = os.path.join(outdir, name)
        image.save(path, format="PNG")
        print(f"✅ {path}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    outdir = argv[0] if argv else tempfile.gettempdir()
    os.makedirs(outdir, exist_ok=True)
    asyncio.run(_render_samples(outdir))


if __name__ == "__main__":
    main()
